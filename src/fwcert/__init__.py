from .extensions import (
    ExtensionRegistry,
    TBBR_EXTENSIONS,
    build_extension,
    encode_counter,
    encode_hash,
    encode_public_key,
    init,
)

__all__ = [
    'ExtensionRegistry',
    'TBBR_EXTENSIONS',
    'build_extension',
    'encode_counter',
    'encode_hash',
    'encode_public_key',
    'init',
]
