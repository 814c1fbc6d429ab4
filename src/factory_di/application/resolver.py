import inspect
from typing import Any, Type, get_type_hints

from factory_di.domain import CircularDependencyError, IContainer, IResolver, UnresolvableError


class DependencyResolver(IResolver):
    """Builds instances by resolving constructor parameters from their type hints.

    Used for types that have no registration of their own, and as the builder
    for factory types registered implicitly by the factory registrar.
    """

    def resolve_dependencies(self, dependency_type: Type, container: IContainer) -> Any:
        """Resolve all constructor dependencies and create instance.

        Args:
            dependency_type: The type to instantiate.
            container: The container to resolve dependencies from.

        Returns:
            Instance with all dependencies injected.

        Raises:
            UnresolvableError: If the type is not a concrete class, a parameter lacks a
                type hint, or a parameter cannot be resolved.
            CircularDependencyError: If a parameter leads back to a type being resolved.

        Example:
            >>> class ReportFactory:
            ...     def __init__(self, repository: ReportRepository):
            ...         self.repository = repository
            >>>
            >>> resolver = DependencyResolver()
            >>> factory = resolver.resolve_dependencies(ReportFactory, container)
        """
        if not inspect.isclass(dependency_type):
            raise UnresolvableError(dependency_type, "Only classes can be auto-wired.")
        if inspect.isabstract(dependency_type):
            raise UnresolvableError(dependency_type, "Abstract types must be registered explicitly.")

        try:
            signature = inspect.signature(dependency_type.__init__)
            type_hints = get_type_hints(dependency_type.__init__)

            kwargs = {}
            for param_name, param in signature.parameters.items():
                if param_name == "self":
                    continue

                if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                    continue

                # Parameters with defaults keep them
                if param.default is not inspect.Parameter.empty:
                    continue

                if param_name not in type_hints:
                    raise UnresolvableError(
                        dependency_type,
                        f"Parameter '{param_name}' lacks type hint and has no default value.",
                    )

                try:
                    kwargs[param_name] = container.resolve(type_hints[param_name])
                except CircularDependencyError:
                    raise
                except Exception as e:
                    raise UnresolvableError(
                        dependency_type,
                        f"Failed to resolve dependency for parameter '{param_name}': {e}",
                    ) from e

            return dependency_type(**kwargs)

        except (UnresolvableError, CircularDependencyError):
            raise
        except Exception as e:
            raise UnresolvableError(
                dependency_type,
                f"Failed to auto-wire constructor for {dependency_type}: {e}",
            ) from e
