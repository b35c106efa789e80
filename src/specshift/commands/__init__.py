"""Built-in CLI sub-commands for specshift.

Sub-modules:
    project: ``specshift project`` and ``specshift warnings``.
    config: ``specshift config show|set|reset``.
"""
