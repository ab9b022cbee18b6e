"""Global configuration: defaults, constants, pay-item fallbacks."""

# Waste fractions applied on top of raw physical quantities.
# Formwork is listed for completeness only; it is never wasted.
DEFAULT_WASTE = {
    "concrete": 0.05,
    "rebar": 0.03,
    "formwork": 0.0,
}

# Decimal places per trade, applied after waste
DEFAULT_ROUNDING = {
    "concrete": 3,
    "rebar": 2,
    "formwork": 2,
}

# Fallback DPWH pay items when a template carries no assignment
DEFAULT_CONCRETE_ITEM = "900 (1) a"
DEFAULT_REBAR_ITEM = "902 (1) a2"
DEFAULT_FORMWORK_ITEM = "903 (1)"

# Generic resource keys for lines without a pay item
CONCRETE_RESOURCE_KEY = "concrete-class-a"

# Lap length = LAP_MULTIPLIER x bar diameter (40d)
LAP_MULTIPLIER = 40

# Two 135-degree hooks per stirrup / tie, metres
HOOK_ALLOWANCE_M = 0.15

# Digits kept before half-away rounding to strip binary float noise
FLOAT_GUARD_DIGITS = 10

# Settings file inside a project root
SETTINGS_DIR = ".qto"
SETTINGS_FILE = "settings.json"

DEFAULT_LOG_LEVEL = "INFO"

# Wall finish height for a space on the topmost level, metres
DEFAULT_STOREY_HEIGHT_M = 3.0

# Decimal places for finish quantities when a finish type sets none
DEFAULT_FINISH_ROUNDING = 3
