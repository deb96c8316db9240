"""
Extension registry for custom certificate extensions.

The registry is the catalog that generic certificate printing consults.
It assigns a numeric id (nid) to every object identifier, and binds each
nid to one print/parse behavior:

- INTEGER / OCTET_STRING: the method pair from methods.METHODS
- ALIAS: the behavior of another, already-known extension
- UNSUPPORTED: no method; the value prints as a raw dump

Registration is fail-fast without rollback: when register_all() raises,
the descriptors processed before the failing one stay registered.
Registering the same table again is a no-op.

Build the registry once, before any extension is built, and treat it as
read-only afterwards.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Union

from cryptography import x509
from cryptography.x509.oid import ExtensionOID

from .codec import asn1_errors
from .methods import METHODS, ExtensionMethod, raw_dump
from .tbbr import TBBR_EXTENSIONS
from .types import (
    NID_CRL_NUMBER,
    NID_DELTA_CRL,
    NID_INHIBIT_ANY_POLICY,
    NID_SUBJECT_KEY_IDENTIFIER,
    EncodingError,
    ExtensionDescriptor,
    MethodKind,
    RegisteredExtension,
    RegistrationError,
    RegistryOptions,
    RegistryState,
    ValueType,
)

logger = logging.getLogger(__name__)

# Standard extensions with a print method, available as alias targets
_STANDARD_EXTENSIONS = (
    (NID_SUBJECT_KEY_IDENTIFIER, ExtensionOID.SUBJECT_KEY_IDENTIFIER.dotted_string,
     "subjectKeyIdentifier", "X509v3 Subject Key Identifier", MethodKind.OCTET_STRING),
    (NID_CRL_NUMBER, ExtensionOID.CRL_NUMBER.dotted_string,
     "crlNumber", "X509v3 CRL Number", MethodKind.INTEGER),
    (NID_DELTA_CRL, ExtensionOID.DELTA_CRL_INDICATOR.dotted_string,
     "deltaCRL", "X509v3 Delta CRL Indicator", MethodKind.INTEGER),
    (NID_INHIBIT_ANY_POLICY, ExtensionOID.INHIBIT_ANY_POLICY.dotted_string,
     "inhibitAnyPolicy", "X509v3 Inhibit Any Policy", MethodKind.INTEGER),
)

_VALUE_TYPE_METHODS = {
    ValueType.INTEGER: MethodKind.INTEGER,
    ValueType.OCTET_STRING: MethodKind.OCTET_STRING,
}

INDENT = "    "


@dataclass(frozen=True)
class _CatalogObject:
    oid: str
    short_name: str
    long_name: str


class ExtensionRegistry:
    """
    Catalog of extension objects and their print/parse behavior.

    Instances are independent of each other. Use init() to build one from
    a descriptor table.
    """

    def __init__(self, options: Optional[RegistryOptions] = None):
        self.options = options or RegistryOptions()
        self._objects: Dict[int, _CatalogObject] = {}
        self._by_oid: Dict[str, int] = {}
        self._by_name: Dict[str, int] = {}
        self._bindings: Dict[int, RegisteredExtension] = {}
        self._next_nid = self.options.first_dynamic_nid
        self._state = RegistryState.UNINITIALIZED

        if self.options.preload_standard:
            for nid, oid, short_name, long_name, kind in _STANDARD_EXTENSIONS:
                self._add_object(nid, _CatalogObject(oid, short_name, long_name))
                self._bindings[nid] = RegisteredExtension(
                    nid=nid, oid=oid, short_name=short_name,
                    long_name=long_name, kind=kind,
                )

    @property
    def state(self) -> RegistryState:
        return self._state

    @property
    def initialized(self) -> bool:
        return self._state is RegistryState.INITIALIZED

    def __contains__(self, nid: object) -> bool:
        return nid in self._objects

    def __len__(self) -> int:
        return len(self._objects)

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def _add_object(self, nid: int, obj: _CatalogObject) -> None:
        self._objects[nid] = obj
        self._by_oid[obj.oid] = nid
        self._by_name[obj.short_name] = nid
        self._by_name[obj.long_name] = nid

    def create_object(self, oid: str, short_name: str, long_name: str) -> int:
        """
        Assign a numeric id to an object identifier.

        Registering an identical (oid, short_name, long_name) triple again
        returns the existing id.

        Raises:
            RegistrationError: If the OID is malformed, or the OID or one of
                the names is already bound to a different object
        """
        try:
            x509.ObjectIdentifier(oid)
        except (ValueError, TypeError) as e:
            raise RegistrationError(f"Invalid object identifier {oid!r}: {e}") from e
        if not short_name or not long_name:
            raise RegistrationError(f"Object {oid} needs both a short and a long name")

        existing = self._by_oid.get(oid)
        if existing is not None:
            obj = self._objects[existing]
            if (obj.short_name, obj.long_name) == (short_name, long_name):
                return existing
            raise RegistrationError(
                f"OID {oid} is already registered as {obj.short_name} ({existing})"
            )

        for name in (short_name, long_name):
            if name in self._by_name:
                taken = self._objects[self._by_name[name]]
                raise RegistrationError(f"Name {name!r} is already used by OID {taken.oid}")

        nid = self._next_nid
        self._next_nid += 1
        self._add_object(nid, _CatalogObject(oid, short_name, long_name))
        logger.debug(f"Created object {short_name} ({oid}) as nid {nid}")
        return nid

    def _bind(self, binding: RegisteredExtension) -> None:
        existing = self._bindings.get(binding.nid)
        if existing == binding:
            return
        if existing is not None:
            raise RegistrationError(
                f"nid {binding.nid} ({binding.short_name}) already has "
                f"{existing.kind.value} behavior"
            )
        self._bindings[binding.nid] = binding

    def _binding_for(self, nid: int, kind: MethodKind,
                     alias_nid: Optional[int] = None) -> RegisteredExtension:
        obj = self._objects.get(nid)
        if obj is None:
            raise RegistrationError(f"Unknown nid {nid}")
        return RegisteredExtension(
            nid=nid, oid=obj.oid, short_name=obj.short_name,
            long_name=obj.long_name, kind=kind, alias_nid=alias_nid,
        )

    def add_method(self, nid: int, kind: MethodKind) -> None:
        """
        Install the INTEGER or OCTET_STRING method pair for nid.

        Raises:
            RegistrationError: If nid is unknown, kind has no method pair,
                or nid already has a different behavior
        """
        if kind not in METHODS:
            raise RegistrationError(f"No method pair for {kind.value} values")
        self._bind(self._binding_for(nid, kind))

    def add_alias(self, nid: int, target: Union[int, str]) -> None:
        """
        Reuse the print/parse behavior of target for nid.

        Args:
            nid: Numeric id receiving the alias
            target: nid, dotted OID, or name of an extension with a method

        Raises:
            RegistrationError: If the target is unknown or has no method,
                or nid already has a different behavior
        """
        target_nid = target if isinstance(target, int) else self.nid_for(target)
        if target_nid is None or target_nid not in self._bindings:
            raise RegistrationError(f"Alias target {target!r} has no registered method")
        if target_nid == nid:
            raise RegistrationError(f"nid {nid} cannot alias itself")
        if self.method_for(target_nid) is None:
            raise RegistrationError(f"Alias target {target!r} has no print method")
        self._bind(self._binding_for(nid, MethodKind.ALIAS, alias_nid=target_nid))

    def _register_one(self, descriptor: ExtensionDescriptor) -> int:
        if descriptor.alias and descriptor.value_type is not None:
            raise RegistrationError(
                f"{descriptor.short_name} declares both an alias and a value type"
            )
        nid = self.create_object(descriptor.oid, descriptor.short_name, descriptor.long_name)
        if descriptor.alias:
            self.add_alias(nid, descriptor.alias)
            return nid

        kind = _VALUE_TYPE_METHODS.get(descriptor.value_type)
        if kind is None:
            # Degrades to the raw dump when printed
            logger.debug(
                f"No print method for {descriptor.short_name} "
                f"({descriptor.value_type}); skipping"
            )
            return nid
        self.add_method(nid, kind)
        return nid

    def register_all(self, descriptors: Iterable[ExtensionDescriptor]) -> None:
        """
        Register every descriptor in order.

        Stops at the first failure. Descriptors processed before it stay
        registered.

        Raises:
            RegistrationError: If any object, alias, or method fails to register
        """
        for descriptor in descriptors:
            try:
                self._register_one(descriptor)
            except RegistrationError as e:
                logger.error(f"Failed to register {descriptor.short_name} ({descriptor.oid}): {e}")
                raise
        self._state = RegistryState.INITIALIZED

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def nid_for(self, text: str) -> Optional[int]:
        """Numeric id for a dotted OID, short name, or long name."""
        nid = self._by_oid.get(text)
        if nid is None:
            nid = self._by_name.get(text)
        return nid

    def oid_for(self, nid: int) -> x509.ObjectIdentifier:
        obj = self._objects.get(nid)
        if obj is None:
            raise KeyError(nid)
        return x509.ObjectIdentifier(obj.oid)

    def lookup(self, nid: int) -> Optional[RegisteredExtension]:
        """
        Binding for nid, or None if nid is unknown.

        Objects registered without a method report MethodKind.UNSUPPORTED.
        """
        binding = self._bindings.get(nid)
        if binding is None and nid in self._objects:
            binding = self._binding_for(nid, MethodKind.UNSUPPORTED)
        return binding

    def resolve(self, nid: int) -> Optional[RegisteredExtension]:
        """Binding for nid with aliases followed to their target."""
        binding = self.lookup(nid)
        seen = set()
        while binding is not None and binding.kind is MethodKind.ALIAS:
            if binding.nid in seen:
                return None
            seen.add(binding.nid)
            binding = self.lookup(binding.alias_nid)
        return binding

    def method_for(self, nid: int) -> Optional[ExtensionMethod]:
        binding = self.resolve(nid)
        if binding is None:
            return None
        return METHODS.get(binding.kind)

    # -------------------------------------------------------------------------
    # Printing
    # -------------------------------------------------------------------------

    def print_value(self, nid: int, value: bytes) -> str:
        """
        Render an extension value (the bytes inside extnValue).

        Values with no method, or that fail to decode with theirs, print
        as a hex/ASCII dump.
        """
        method = self.method_for(nid)
        if method is None:
            return raw_dump(value)
        try:
            decoded = method.decode(value)
        except EncodingError as e:
            logger.debug(f"Value of nid {nid} does not decode as {method.kind.value}: {e}")
            return raw_dump(value)
        if method.kind is MethodKind.OCTET_STRING:
            return method.i2s(decoded, self.options.octet_string_line_width)
        return method.i2s(decoded)

    def parse_value(self, nid: int, text: str) -> bytes:
        """
        Read a printed value back into DER.

        Raises:
            EncodingError: If nid has no method or the text is malformed
        """
        method = self.method_for(nid)
        if method is None:
            raise EncodingError(f"nid {nid} has no parse method")
        with asn1_errors(f"value of nid {nid}"):
            return method.encode(method.s2i(text))

    def print_extension(self, ext: x509.Extension) -> str:
        """Render an extension the way certificate printers list it."""
        if isinstance(ext.value, x509.UnrecognizedExtension):
            value = ext.value.value
        else:
            value = ext.value.public_bytes()

        nid = self.nid_for(ext.oid.dotted_string)
        if nid is None:
            name = ext.oid.dotted_string
            rendered = raw_dump(value)
        else:
            name = self._objects[nid].long_name
            rendered = self.print_value(nid, value)

        header = f"{name}: critical" if ext.critical else f"{name}:"
        body = "\n".join(INDENT + line for line in rendered.splitlines())
        return f"{header}\n{body}" if body else header


def init(descriptors: Optional[Iterable[ExtensionDescriptor]] = None,
         options: Optional[RegistryOptions] = None) -> ExtensionRegistry:
    """
    Build a registry and register a descriptor table into it.

    Args:
        descriptors: Table to register (default: the TBBR extensions)
        options: Registry configuration

    Returns:
        The initialized registry

    Raises:
        RegistrationError: If the table cannot be registered
    """
    registry = ExtensionRegistry(options)
    registry.register_all(TBBR_EXTENSIONS if descriptors is None else descriptors)
    return registry
