"""In-memory transport modules, discovered at runtime by name.

Nothing in the tool imports these statically: they are imported inside the
relayed process so that their dependencies resolve against the target's
environment.
"""
