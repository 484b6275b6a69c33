"""Helper configuration.

HelperConfig is a frozen dataclass, immutable after creation and shared by
the URL helper and the body-params middleware.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class HelperConfig:
    """Helper configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = HelperConfig(base_path="/admin", reuse_result_params=False)
    """

    # URL generation
    base_path: str = ""
    reuse_result_params: bool = True

    # Body parsing
    body_methods_skipped: tuple[str, ...] = ("GET", "HEAD", "OPTIONS")
    multipart: bool = True  # Register MultipartStrategy by default (needs python-multipart)
