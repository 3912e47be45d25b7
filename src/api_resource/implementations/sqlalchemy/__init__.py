from .core import SQLADescriptor, SQLAInspector  # noqa
from .declarative import SQLAResource, default_inspector  # noqa
from .querying import paginate  # noqa
