from .builder import Builder, build  # noqa
from .collection import CollectionResource  # noqa
from .exceptions import (  # noqa
    ApiResourceException,
    InvalidDeclarationError,
    InvalidRelationPathError,
    MissingAttributeError,
    MissingRelationError,
    NativeError,
    UnsupportedOperationError,
)
from .interfaces import (  # noqa
    NativeAttributeInspector,
    NativeEntityLoader,
    NativeInspector,
    NativeRelationshipInspector,
    Paginator,
    RelationKind,
    Request,
)
from .pagination import LengthAwarePaginator  # noqa
from .relations import RelationSpec  # noqa
from .request import MappingRequest, bind_request, current_request  # noqa
from .resource import Resource  # noqa
from .response import JSONResponse  # noqa
from .values import MISSING, MergeValue  # noqa
