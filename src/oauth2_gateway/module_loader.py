import importlib
import logging

logger = logging.getLogger(__name__)


def load_custom_class(module_name: str, class_name: str, base_class: type) -> type:
    """
    Load ``class_name`` from ``module_name`` and check it subclasses ``base_class``.

    Raises:
        ImportError: If the module cannot be imported
        ValueError: If the class is not found in the module
        TypeError: If the class is not a subclass of ``base_class``
    """
    try:
        module = importlib.import_module(module_name)
    except Exception as e:
        raise ImportError(f"Failed to load module '{module_name}': {e}") from e

    if not hasattr(module, class_name):
        raise ValueError(f"Custom class: {class_name} Not found in module: {module_name}")

    custom_class = getattr(module, class_name)
    if not isinstance(custom_class, type) or not issubclass(custom_class, base_class):
        raise TypeError(f"Class '{class_name}' is not a subclass of {base_class.__name__}.")

    logger.debug(f"Loaded {class_name} from {module_name}")
    return custom_class
