from .api import from_callback as from_callback
from .api import promisify as promisify
from .api import promisify_all as promisify_all
from .exceptions import CallbackError as CallbackError
from .exceptions import PromisifyConfigError as PromisifyConfigError
from .heuristics import class_like as class_like
from .logging import setup_logging as setup_logging
from .models import USE_THIS as USE_THIS
from .models import AdapterOptions as AdapterOptions
from .models import BulkOptions as BulkOptions
from .proxy import PromisifiedFunction as PromisifiedFunction
from .proxy import is_promisified as is_promisified

__all__ = [
    "promisify",
    "promisify_all",
    "from_callback",
    "is_promisified",
    "class_like",
    "USE_THIS",
    "PromisifiedFunction",
    "PromisifyConfigError",
    "CallbackError",
    "AdapterOptions",
    "BulkOptions",
    "setup_logging",
]
