"""Map member values between independently defined types.

Correspondences are discovered by member name (and, for record targets, by
constructor parameter name and type), built once per type pair, cached in a
registry and reused for every later mapping of that pair.
"""

from fieldmap.builder import build_object_mapping, build_record_mapping
from fieldmap.constructors import record_constructor
from fieldmap.errors import (
    MappingDefinitionError,
    MappingError,
    MappingRegistrationError,
    RecordConstructionError,
)
from fieldmap.mapper import AfterMap, Mapper
from fieldmap.members import (
    SKIP_MAPPING,
    MemberDescriptor,
    SkipMapping,
    describe_members,
    skip_field,
)
from fieldmap.plans import (
    ConstructorSlot,
    FieldCorrespondence,
    MappingKey,
    RecordTypePairMapping,
    ShapeKind,
    TypePairMapping,
)
from fieldmap.registry import MappingRegistry, default_registry
from fieldmap.settings import MapperSettings, settings_from_env

__all__ = [
    "SKIP_MAPPING",
    "AfterMap",
    "ConstructorSlot",
    "FieldCorrespondence",
    "Mapper",
    "MapperSettings",
    "MappingDefinitionError",
    "MappingError",
    "MappingKey",
    "MappingRegistrationError",
    "MappingRegistry",
    "MemberDescriptor",
    "RecordConstructionError",
    "RecordTypePairMapping",
    "ShapeKind",
    "SkipMapping",
    "TypePairMapping",
    "build_object_mapping",
    "build_record_mapping",
    "default_registry",
    "describe_members",
    "record_constructor",
    "settings_from_env",
    "skip_field",
]
