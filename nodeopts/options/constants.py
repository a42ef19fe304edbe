"""Shared constants for the option subsystem.

Store and namespace names are defined here to prevent implicit coupling
between the registry, the durable store and the boot configuration.
"""

# Boot configuration namespace; an override for option X lives at OPTIONS_NAMESPACE + X
OPTIONS_NAMESPACE = "exec.options."

# Durable store table for node-wide (SYSTEM scope) overrides
STORE_OPTIONS_TABLE = "sys_options"

# Signed 64-bit bounds for integer options
INTEGER_MIN = -(2**63)
INTEGER_MAX = 2**63 - 1
