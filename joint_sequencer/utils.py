"""
Utility functions for the joint sequencer.
"""


def build_config_from_args(args):
    """Build JointLengthSequencer config from an argparse Namespace.

    Returns: config dict
    """
    config = {
        "search": getattr(args, "search", None),
        "executor": getattr(args, "executor", None),
        "max_workers": getattr(args, "workers", None),
    }
    if getattr(args, "sequential", False):
        config["parallel"] = False

    # Remove None values to avoid overriding defaults
    return {k: v for k, v in config.items() if v is not None}
