"""Runtime reflection introspector.

Plain classes expose their effective ``__init__`` and the classmethods
declared with ``@constructor``. Canonical shapes (dataclasses, Pydantic
models, NamedTuples) additionally expose their primary constructor, the
one generated from their fields.

Constructors whose code was generated at runtime (``co_filename`` like
``<string>``) are flagged synthetic.
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
import sys
import typing
from typing import Annotated, Any, Callable, ClassVar

from pydantic import BaseModel

from row_projection.core.annotations import annotations_of, is_alternate_constructor
from row_projection.introspection.model import ConstructorInfo, FieldInfo

logger = logging.getLogger(__name__)

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


def _is_pydantic_model(cls: Any) -> bool:
    """Check if an object is a Pydantic BaseModel subclass."""
    return isinstance(cls, type) and issubclass(cls, BaseModel)


def _is_named_tuple(cls: Any) -> bool:
    return isinstance(cls, type) and issubclass(cls, tuple) and hasattr(cls, "_fields")


def _is_generated(func: Any) -> bool:
    code = getattr(func, "__code__", None)
    return code is not None and code.co_filename.startswith("<")


def _is_abstract(cls: type) -> bool:
    return inspect.isabstract(cls) or bool(getattr(cls, "_is_protocol", False))


def _split_annotated(hint: Any) -> tuple[Any, tuple[Any, ...]]:
    """Separate ``Annotated[T, *metadata]`` into ``T`` and its metadata."""
    if typing.get_origin(hint) is Annotated:
        base, *metadata = typing.get_args(hint)
        return base, tuple(metadata)
    return hint, ()


def _parameters(func: Any) -> list[inspect.Parameter] | None:
    """Parameters after the leading ``self``/``cls``, variadics dropped.

    Returns None when the callable exposes no signature.
    """
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    params = list(signature.parameters.values())[1:]
    return [p for p in params if p.kind not in _VARIADIC]


class _Namespace(dict):  # type: ignore[type-arg]
    """Local names for hint evaluation, falling back to the calling frames.

    Classes declared inside a function keep their annotations as strings
    naming other local classes; those names are looked up in the frames on
    the current call stack, innermost first, the way pydantic resolves
    models declared in a function body.
    """

    def __init__(self, names: dict[str, Any], globalns: dict[str, Any]) -> None:
        super().__init__(names)
        self._globalns = globalns

    def __missing__(self, key: str) -> Any:
        if key in self._globalns:
            return self._globalns[key]
        frame = sys._getframe(1)
        while frame is not None:
            if not frame.f_globals.get("__name__", "").startswith("row_projection"):
                if key in frame.f_locals:
                    return frame.f_locals[key]
            frame = frame.f_back
        raise KeyError(key)


def _resolve_each(
    annotations: dict[str, Any], globalns: dict[str, Any], localns: dict[str, Any]
) -> dict[str, Any]:
    """Evaluate string annotations one by one; unresolvable ones stay strings."""
    namespace = _Namespace(localns, globalns)
    resolved = {}
    for name, hint in annotations.items():
        if isinstance(hint, str):
            try:
                hint = eval(hint, globalns, namespace)  # noqa: S307
            except (NameError, AttributeError, TypeError):
                logger.debug("Leaving annotation %r of '%s' unresolved", hint, name)
        resolved[name] = hint
    return resolved


def _module_globals(obj: Any) -> dict[str, Any]:
    module = sys.modules.get(getattr(obj, "__module__", None) or "")
    return dict(vars(module)) if module is not None else {}


def _class_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls, localns={cls.__name__: cls}, include_extras=True)
    except (NameError, TypeError):
        pass

    hints: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        localns = {**vars(klass), klass.__name__: klass, cls.__name__: cls}
        hints.update(
            _resolve_each(inspect.get_annotations(klass), _module_globals(klass), localns)
        )
    return hints


def _function_hints(func: Any, owner: type) -> dict[str, Any]:
    # Names resolve where the function was written, not where it is inherited
    globalns = dict(getattr(func, "__globals__", None) or _module_globals(owner))
    localns = {owner.__name__: owner}
    try:
        return typing.get_type_hints(
            func, globalns=globalns, localns=localns, include_extras=True
        )
    except (NameError, TypeError):
        return _resolve_each(dict(getattr(func, "__annotations__", {})), globalns, localns)


def _positional_factory(target: Callable[..., Any], params: list[inspect.Parameter]) -> Any:
    """Wrap ``target`` so it accepts every parameter positionally."""
    keyword = [p.kind is inspect.Parameter.KEYWORD_ONLY for p in params]
    if not any(keyword):
        return target
    names = [p.name for p in params]

    def create(*args: Any) -> Any:
        positional = [value for value, kw in zip(args, keyword) if not kw]
        named = {name: value for name, value, kw in zip(names, args, keyword) if kw}
        return target(*positional, **named)

    return create


def _model_factory(model: type[BaseModel]) -> Callable[..., Any]:
    keys = [info.alias or name for name, info in model.model_fields.items()]

    def create(*args: Any) -> Any:
        return model.model_validate(dict(zip(keys, args, strict=True)))

    return create


class ReflectionIntrospector:
    """TypeIntrospector backed by ``inspect`` and ``typing``."""

    def constructors(self, target: type) -> list[ConstructorInfo]:
        if not isinstance(target, type) or _is_abstract(target):
            return []

        declared = vars(target)
        found: list[ConstructorInfo] = []
        # An inherited __init__ counts as declared ahead of the class body
        if "__init__" not in declared:
            found.append(self._init_constructor(target))
        for name, member in declared.items():
            if name == "__init__":
                found.append(self._init_constructor(target))
            elif isinstance(member, classmethod) and is_alternate_constructor(member):
                found.append(self._alternate_constructor(target, name, member.__func__))
        return found

    def fields(self, target: type) -> list[FieldInfo]:
        if not isinstance(target, type):
            return []
        if _is_pydantic_model(target):
            return [
                FieldInfo(name=name, type=info.annotation, annotations=tuple(info.metadata))
                for name, info in target.model_fields.items()
            ]

        result = []
        for name, hint in _class_hints(target).items():
            if hint is ClassVar or typing.get_origin(hint) is ClassVar:
                continue
            base, metadata = _split_annotated(hint)
            result.append(FieldInfo(name=name, type=base, annotations=metadata))
        return result

    def is_canonical_shape(self, target: type) -> bool:
        return (
            _is_pydantic_model(target)
            or _is_named_tuple(target)
            or dataclasses.is_dataclass(target)
        )

    def has_primary_constructor(self, target: type) -> bool:
        if _is_pydantic_model(target) or _is_named_tuple(target):
            return True
        if dataclasses.is_dataclass(target):
            # init=False or a hand-written __init__ leaves no generated one
            return _is_generated(target.__init__)
        return False

    def primary_constructor(self, target: type) -> ConstructorInfo | None:
        if not self.has_primary_constructor(target) or _is_abstract(target):
            return None

        if _is_pydantic_model(target):
            return ConstructorInfo(
                declaring_type=target,
                name="model_validate",
                parameter_count=len(target.model_fields),
                factory=_model_factory(target),
                synthetic=True,
                handle=target,
            )

        if _is_named_tuple(target):
            new = target.__new__
            params = _parameters(new) or []
            return ConstructorInfo(
                declaring_type=target,
                name="__new__",
                parameter_count=len(params),
                factory=_positional_factory(target, params),
                synthetic=_is_generated(new),
                handle=new,
            )

        return self._init_constructor(target)

    def parameter_types(self, constructor: ConstructorInfo) -> list[Any]:
        return [type_ for _, type_, _ in self._describe(constructor) or []]

    def parameter_names(self, constructor: ConstructorInfo) -> list[str] | None:
        described = self._describe(constructor)
        if described is None:
            return None
        return [name for name, _, _ in described]

    def parameter_annotations(self, constructor: ConstructorInfo) -> list[tuple[Any, ...]]:
        return [metadata for _, _, metadata in self._describe(constructor) or []]

    def _describe(
        self, constructor: ConstructorInfo
    ) -> list[tuple[str, Any, tuple[Any, ...]]] | None:
        """(name, type, markers) per parameter, or None without a signature."""
        handle = constructor.handle
        if _is_pydantic_model(handle):
            return [
                (name, info.annotation, tuple(info.metadata))
                for name, info in handle.model_fields.items()
            ]

        params = _parameters(handle)
        if params is None:
            return None

        # Generated constructors mirror the class annotations
        if _is_generated(handle):
            hints = _class_hints(constructor.declaring_type)
        else:
            hints = _function_hints(handle, constructor.declaring_type)

        described = []
        for param in params:
            base, metadata = _split_annotated(hints.get(param.name, Any))
            described.append((param.name, base, metadata))
        return described

    def _init_constructor(self, target: type) -> ConstructorInfo:
        init = target.__init__
        params = _parameters(init) or []
        return ConstructorInfo(
            declaring_type=target,
            name="__init__",
            parameter_count=len(params),
            factory=_positional_factory(target, params),
            synthetic=_is_generated(init),
            annotations=annotations_of(init),
            handle=init,
        )

    def _alternate_constructor(self, target: type, name: str, func: Any) -> ConstructorInfo:
        params = _parameters(func) or []
        return ConstructorInfo(
            declaring_type=target,
            name=name,
            parameter_count=len(params),
            factory=_positional_factory(getattr(target, name), params),
            synthetic=_is_generated(func),
            annotations=annotations_of(func),
            handle=func,
        )
