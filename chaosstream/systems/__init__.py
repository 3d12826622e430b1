"""Vector-field models integrated by chaosstream."""

from chaosstream.systems.fields import (
    FIELD_REGISTRY,
    Lorenz96Field,
    LorenzField,
    ModelVariant,
    lorenz,
    lorenz96,
    make_field,
    wrap_index,
)
