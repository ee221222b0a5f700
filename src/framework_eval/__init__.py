"""framework-eval - chunked LLM evaluation of web content against value frameworks."""

from framework_eval.config.settings import _PACKAGE_VERSION as __version__

__all__ = ["__version__"]
