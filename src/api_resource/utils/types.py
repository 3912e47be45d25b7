import typing


class UnspecifiedType:
    """
    Marks a setting that was never given, as opposed to one explicitly set to :py:const:`None`.
    """

    _singleton: typing.ClassVar[typing.Optional["UnspecifiedType"]] = None

    def __bool__(self):
        return False

    def __repr__(self) -> str:
        return "UNSPECIFIED"

    def __new__(cls) -> "UnspecifiedType":
        if cls._singleton is None:
            cls._singleton = object.__new__(cls)
        return cls._singleton


UNSPECIFIED = UnspecifiedType()
