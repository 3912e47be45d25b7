import abc
import typing


class ApiResourceException(Exception, metaclass=abc.ABCMeta):
    @property
    @abc.abstractmethod
    def message(self) -> str:
        ...  # pragma: nocover

    def __str__(self):
        return self.message


class InvalidDeclarationError(ApiResourceException):
    _message: str

    @property
    def message(self) -> str:
        return self._message

    def __init__(self, message: str):
        super().__init__(message)
        self._message = message


class UnsupportedOperationError(ApiResourceException):
    operation: str
    resourceable: typing.Any

    @property
    def message(self) -> str:
        return f"{self.operation} is not supported for {type(self.resourceable).__name__}"

    def __init__(self, operation: str, resourceable: typing.Any):
        super().__init__(operation, resourceable)
        self.operation = operation
        self.resourceable = resourceable


class InvalidRelationPathError(ApiResourceException):
    path: typing.Any
    detail: typing.Optional[str]

    @property
    def message(self) -> str:
        return f'invalid relation path{" (" + self.detail + ")" if self.detail is not None else ""}: {self.path!r}'

    def __init__(self, path: typing.Any, detail: typing.Optional[str] = None):
        super().__init__(path, detail)
        self.path = path
        self.detail = detail


class NativeError(ApiResourceException):
    pass


class MissingRelationError(NativeError):
    class_: type
    name: str

    @property
    def message(self) -> str:
        return f"no such relation found in {self.class_.__name__}: {self.name}"

    def __init__(self, class_: type, name: str):
        super().__init__(class_, name)
        self.class_ = class_
        self.name = name


class MissingAttributeError(NativeError):
    class_: type
    name: str

    @property
    def message(self) -> str:
        return f"no such attribute found in {self.class_.__name__}: {self.name}"

    def __init__(self, class_: type, name: str):
        super().__init__(class_, name)
        self.class_ = class_
        self.name = name
