"""Domain layer for the Posta governance core.

Contains the case lifecycle models, the routing selection rule and the
exception hierarchy. The domain layer has no infrastructure dependencies.
"""

from posta.domain.exceptions import PostaError

__all__: list[str] = ["PostaError"]
