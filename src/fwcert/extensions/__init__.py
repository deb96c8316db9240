from .builder import (
    build_extension,
    extension_from_der,
    extension_to_der,
    new_counter_extension,
    new_hash_extension,
    new_key_extension,
)
from .codec import encode_counter, encode_hash, encode_public_key
from .registry import ExtensionRegistry, init
from .tbbr import TBBR_EXTENSIONS
from .types import (
    BuilderError,
    EncodingError,
    ExtensionDescriptor,
    ExtensionError,
    MethodKind,
    RegisteredExtension,
    RegistrationError,
    RegistryOptions,
    RegistryState,
    ValueType,
)

__all__ = [
    'build_extension',
    'extension_from_der',
    'extension_to_der',
    'new_counter_extension',
    'new_hash_extension',
    'new_key_extension',
    'encode_counter',
    'encode_hash',
    'encode_public_key',
    'ExtensionRegistry',
    'init',
    'TBBR_EXTENSIONS',
    'BuilderError',
    'EncodingError',
    'ExtensionDescriptor',
    'ExtensionError',
    'MethodKind',
    'RegisteredExtension',
    'RegistrationError',
    'RegistryOptions',
    'RegistryState',
    'ValueType',
]
