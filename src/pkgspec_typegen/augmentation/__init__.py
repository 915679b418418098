"""Augmentation overlay exports."""

from .augment_loader import AugmentationConfigError, load_augmentations, parse_augmentations
from .augment_models import (
    AugmentConfig,
    BaseTypeSpec,
    ExtraField,
    FieldAugmentation,
    TypeAugmentation,
)
from .augmentation_engine import METADATA_FIELD_NAME, apply_augmentations, apply_base_types
from .type_expressions import parse_type_expression

__all__ = [
    "AugmentConfig",
    "AugmentationConfigError",
    "BaseTypeSpec",
    "ExtraField",
    "FieldAugmentation",
    "METADATA_FIELD_NAME",
    "TypeAugmentation",
    "apply_augmentations",
    "apply_base_types",
    "load_augmentations",
    "parse_augmentations",
    "parse_type_expression",
]
