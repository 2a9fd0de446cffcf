"""
santa_core package: participant models, source IO, validation, matcher, config and notifier.
"""
__all__ = [
    "models",
    "aliases",
    "io",
    "validation",
    "constraints",
    "sampler",
    "solver_ilp",
    "matcher",
    "config",
    "notifier",
    "errors",
    "cli",
]
