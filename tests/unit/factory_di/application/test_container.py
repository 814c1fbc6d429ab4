"""Unit tests for DIContainer."""

import threading
from dataclasses import dataclass

import pytest

from factory_di.application.container import DIContainer
from factory_di.domain import (
    CircularDependencyError,
    ContainerOptions,
    IContainer,
    IFactory,
    Lifetime,
    ScopeError,
    UnresolvableError,
)


class TestContainerInitialization:
    """Test cases for DIContainer initialization."""

    def test_container_initialization(self):
        """Test that container initializes correctly."""
        container = DIContainer()
        assert container._registry == {}
        assert container._resolver is not None
        assert container._lifetime_manager is not None
        assert container._resolution_stack is not None
        assert container.options == ContainerOptions()
        assert not container.is_scope

    def test_container_implements_interface(self):
        """Test that DIContainer implements IContainer."""
        assert isinstance(DIContainer(), IContainer)


class TestRegister:
    """Test cases for single registrations."""

    def test_register_appends_registration(self):
        """Test that register stores a registration with the given lifetime."""
        container = DIContainer()

        class Clock:
            pass

        container.register(Clock, lambda c: Clock(), Lifetime.SINGLETON)

        registrations = container.get_registrations(Clock)
        assert len(registrations) == 1
        assert registrations[0].dependency_type is Clock
        assert registrations[0].lifetime == Lifetime.SINGLETON
        assert registrations[0].factory_type is None

    def test_register_returns_container(self):
        """Test that register supports chaining."""
        container = DIContainer()

        class Clock:
            pass

        assert container.register(Clock, lambda c: Clock(), Lifetime.TRANSIENT) is container

    def test_register_twice_keeps_both_and_last_wins(self):
        """Test that a later registration is used without removing the earlier one."""
        container = DIContainer()

        class Greeting:
            def __init__(self, text: str = ""):
                self.text = text

        container.register(Greeting, lambda c: Greeting("hello"), Lifetime.SINGLETON)
        container.register(Greeting, lambda c: Greeting("hi"), Lifetime.TRANSIENT)

        assert len(container.get_registrations(Greeting)) == 2
        assert container.resolve(Greeting).text == "hi"

    def test_try_register_adds_when_absent(self):
        """Test that try_register adds a missing registration."""
        container = DIContainer()

        class Clock:
            pass

        assert container.try_register(Clock, lambda c: Clock(), Lifetime.TRANSIENT) is True
        assert container.is_registered(Clock)

    def test_try_register_skips_when_present(self):
        """Test that try_register leaves an existing registration untouched."""
        container = DIContainer()

        class Clock:
            pass

        container.register(Clock, lambda c: Clock(), Lifetime.SINGLETON)

        assert container.try_register(Clock, lambda c: Clock(), Lifetime.TRANSIENT) is False
        registrations = container.get_registrations(Clock)
        assert len(registrations) == 1
        assert registrations[0].lifetime == Lifetime.SINGLETON

    def test_is_registered_false_for_unknown_type(self):
        """Test that unknown types are reported as unregistered."""

        class Unknown:
            pass

        assert DIContainer().is_registered(Unknown) is False

    def test_get_registrations_for_unknown_type_is_empty(self):
        """Test that unknown types have no registrations."""

        class Unknown:
            pass

        assert DIContainer().get_registrations(Unknown) == []


class TestBatchRegistration:
    """Test cases for batch registration."""

    @pytest.mark.parametrize(
        "method, lifetime",
        [
            ("register_singletons", Lifetime.SINGLETON),
            ("register_transients", Lifetime.TRANSIENT),
            ("register_scoped", Lifetime.SCOPED),
        ],
    )
    def test_batch_registration_lifetime(self, method, lifetime):
        """Test that each batch method registers with its lifetime."""
        container = DIContainer()

        class ServiceA:
            pass

        class ServiceB:
            pass

        getattr(container, method)({ServiceA: lambda c: ServiceA(), ServiceB: lambda c: ServiceB()})

        assert len(container._registry) == 2
        assert all(container.get_registrations(cls)[0].lifetime == lifetime for cls in [ServiceA, ServiceB])

    def test_register_singleton_with_dependencies(self):
        """Test registering singleton that depends on other singletons."""
        container = DIContainer()

        class DatabaseConfig:
            pass

        class DatabaseConnection:
            def __init__(self, config: DatabaseConfig):
                self.config = config

        container.register_singletons(
            {
                DatabaseConfig: lambda c: DatabaseConfig(),
                DatabaseConnection: lambda c: DatabaseConnection(c.resolve(DatabaseConfig)),
            }
        )

        instance = container.resolve(DatabaseConnection)
        assert isinstance(instance.config, DatabaseConfig)
        assert instance.config is container.resolve(DatabaseConfig)


class TestFactoryRegistrationMethods:
    """Test cases for the container's factory registration shortcuts."""

    def test_register_with_factory_defaults_to_transient(self):
        """Test that register_with_factory uses transient by default."""
        container = DIContainer()

        class Token:
            pass

        class TokenFactory(IFactory[Token]):
            def provide(self) -> Token:
                return Token()

        result = container.register_with_factory(Token, TokenFactory)

        assert result is container
        assert container.get_registrations(Token)[0].lifetime == Lifetime.TRANSIENT
        assert container.resolve(Token) is not container.resolve(Token)

    def test_register_factories(self):
        """Test registering several factory-backed services at once."""
        container = DIContainer()

        class Token:
            pass

        class Session:
            pass

        class TokenFactory:
            def provide(self) -> Token:
                return Token()

        class SessionFactory:
            def provide(self) -> Session:
                return Session()

        container.register_factories({Token: TokenFactory, Session: SessionFactory}, Lifetime.SINGLETON)

        assert container.resolve(Token) is container.resolve(Token)
        assert isinstance(container.resolve(Session), Session)
        assert container.get_registrations(TokenFactory)[0].lifetime == Lifetime.TRANSIENT
        assert container.get_registrations(SessionFactory)[0].lifetime == Lifetime.TRANSIENT


class TestResolution:
    """Test cases for dependency resolution."""

    def test_resolve_singleton_returns_same_instance(self):
        """Test that resolving singleton returns same instance."""
        container = DIContainer()

        class TestService:
            pass

        container.register_singletons({TestService: lambda c: TestService()})

        assert container.resolve(TestService) is container.resolve(TestService)

    def test_resolve_transient_returns_new_instances(self):
        """Test that resolving transient returns new instances."""
        container = DIContainer()

        class TestService:
            pass

        container.register_transients({TestService: lambda c: TestService()})

        assert container.resolve(TestService) is not container.resolve(TestService)

    def test_resolve_increments_resolution_count(self):
        """Test that resolution count is tracked per registration."""
        container = DIContainer()

        class TestService:
            pass

        container.register_transients({TestService: lambda c: TestService()})
        container.resolve(TestService)
        container.resolve(TestService)

        assert container._registry[TestService][-1].resolution_count == 2

    def test_resolve_auto_wires_unregistered_type(self):
        """Test that unregistered types are auto-wired."""
        container = DIContainer()

        class Repository:
            pass

        class Service:
            def __init__(self, repository: Repository):
                self.repository = repository

        instance = container.resolve(Service)
        assert isinstance(instance.repository, Repository)

    def test_resolve_unregistered_type_without_auto_wiring_raises(self):
        """Test that auto-wiring can be disabled."""
        container = DIContainer(ContainerOptions(auto_wire=False))

        class Service:
            pass

        with pytest.raises(UnresolvableError) as exc_info:
            container.resolve(Service)

        assert exc_info.value.cls is Service
        assert "auto-wiring is disabled" in str(exc_info.value)

    def test_builder_errors_propagate_unchanged(self):
        """Test that errors raised by builders are not wrapped."""
        container = DIContainer()

        class Service:
            pass

        def failing_builder(c):
            raise RuntimeError("boom")

        container.register_singletons({Service: failing_builder})

        with pytest.raises(RuntimeError, match="boom"):
            container.resolve(Service)

    def test_circular_dependency_detected(self):
        """Test that circular registrations raise CircularDependencyError."""
        container = DIContainer()

        class ServiceA:
            pass

        class ServiceB:
            pass

        container.register_transients(
            {
                ServiceA: lambda c: c.resolve(ServiceB),
                ServiceB: lambda c: c.resolve(ServiceA),
            }
        )

        with pytest.raises(CircularDependencyError) as exc_info:
            container.resolve(ServiceA)

        assert exc_info.value.dependency_chain == [ServiceA, ServiceB, ServiceA]

    def test_resolution_stack_cleared_after_error(self):
        """Test that a failed resolution does not poison later resolutions."""
        container = DIContainer(ContainerOptions(auto_wire=False))

        class Service:
            pass

        with pytest.raises(UnresolvableError):
            container.resolve(Service)

        container.register_transients({Service: lambda c: Service()})
        assert isinstance(container.resolve(Service), Service)

    def test_scopes_share_the_root_resolution_stack(self):
        """Test that a root and its nested scopes track resolutions together."""
        container = DIContainer()

        scope = container.create_scope()
        nested = scope.create_scope()

        assert scope._resolution_stack is container._resolution_stack
        assert nested._resolution_stack is container._resolution_stack

    def test_cycle_through_root_singleton_detected(self):
        """Test that a cycle leaving a scope through a root singleton is reported whole."""
        container = DIContainer()

        class Settings:
            pass

        class Session:
            pass

        container.register_singletons({Settings: lambda c: c.resolve(Session)})
        container.register_scoped({Session: lambda c: c.resolve(Settings)})

        with container.create_scope() as scope:
            with pytest.raises(CircularDependencyError) as exc_info:
                scope.resolve(Session)

        assert exc_info.value.dependency_chain == [Session, Settings, Session]
        assert container._resolution_stack.types == []


class TestScopes:
    """Test cases for scoped containers."""

    def test_create_scope_returns_scope(self):
        """Test that create_scope returns a scoped container."""
        container = DIContainer()

        scope = container.create_scope()

        assert isinstance(scope, DIContainer)
        assert scope.is_scope
        assert scope.options is container.options

    def test_scoped_instance_shared_within_scope(self):
        """Test that scoped registrations are cached per scope."""
        container = DIContainer()

        class RequestContext:
            pass

        container.register_scoped({RequestContext: lambda c: RequestContext()})

        with container.create_scope() as scope1, container.create_scope() as scope2:
            assert scope1.resolve(RequestContext) is scope1.resolve(RequestContext)
            assert scope1.resolve(RequestContext) is not scope2.resolve(RequestContext)

    def test_singletons_shared_between_root_and_scopes(self):
        """Test that scopes reuse the root's singletons."""
        container = DIContainer()

        class Config:
            pass

        container.register_singletons({Config: lambda c: Config()})
        root_instance = container.resolve(Config)

        with container.create_scope() as scope:
            assert scope.resolve(Config) is root_instance

    def test_singleton_first_resolved_in_scope_is_shared(self):
        """Test that a singleton built inside a scope is the root's singleton."""
        container = DIContainer()

        class Config:
            pass

        container.register_singletons({Config: lambda c: Config()})

        with container.create_scope() as scope:
            scoped_instance = scope.resolve(Config)

        assert container.resolve(Config) is scoped_instance

    def test_nested_scope_shares_root_singletons(self):
        """Test that scopes created from scopes still share root singletons."""
        container = DIContainer()

        class Config:
            pass

        container.register_singletons({Config: lambda c: Config()})

        with container.create_scope() as outer:
            with outer.create_scope() as inner:
                assert inner.resolve(Config) is container.resolve(Config)

    def test_closing_scope_releases_scoped_instances(self):
        """Test that leaving a scope block drops its scoped instances."""
        container = DIContainer()

        class RequestContext:
            pass

        container.register_scoped({RequestContext: lambda c: RequestContext()})
        scope = container.create_scope()

        with scope:
            first = scope.resolve(RequestContext)

        assert scope.resolve(RequestContext) is not first

    def test_scope_registrations_do_not_leak_to_parent(self):
        """Test that registering in a scope leaves the parent untouched."""
        container = DIContainer()

        class Extra:
            pass

        scope = container.create_scope()
        scope.register_transients({Extra: lambda c: Extra()})

        assert scope.is_registered(Extra)
        assert not container.is_registered(Extra)

    def test_scoped_from_root_allowed_by_default(self):
        """Test that the root container acts as a scope unless validation is on."""
        container = DIContainer()

        class RequestContext:
            pass

        container.register_scoped({RequestContext: lambda c: RequestContext()})

        assert container.resolve(RequestContext) is container.resolve(RequestContext)

    def test_scoped_from_root_rejected_with_validation(self):
        """Test that scope validation rejects scoped resolution from the root."""
        container = DIContainer(ContainerOptions(validate_scopes=True))

        class RequestContext:
            pass

        container.register_scoped({RequestContext: lambda c: RequestContext()})

        with pytest.raises(ScopeError):
            container.resolve(RequestContext)

        with container.create_scope() as scope:
            assert isinstance(scope.resolve(RequestContext), RequestContext)


class TestClear:
    """Test cases for clearing containers."""

    def test_clear_removes_registrations_and_singletons(self):
        """Test that clear resets the container."""
        container = DIContainer()

        class Config:
            pass

        container.register_singletons({Config: lambda c: Config()})
        first = container.resolve(Config)

        container.clear()
        container.register_singletons({Config: lambda c: Config()})

        assert len(container.get_registrations(Config)) == 1
        assert container.resolve(Config) is not first

    def test_clearing_scope_keeps_root_singletons(self):
        """Test that clearing a scope does not drop the root's singletons."""
        container = DIContainer()

        class Config:
            pass

        container.register_singletons({Config: lambda c: Config()})
        first = container.resolve(Config)

        scope = container.create_scope()
        scope.clear()

        assert not scope.is_registered(Config)
        assert container.resolve(Config) is first


class TestConcurrentResolution:
    """Test cases for resolving from several threads at once."""

    def test_singleton_and_scoped_builders_resolving_each_other_do_not_deadlock(self):
        """Test that singleton and scoped builders can be built on two threads at once."""
        container = DIContainer()
        barrier = threading.Barrier(2, timeout=3)

        class SingletonA:
            pass

        class SingletonB:
            pass

        class ScopedA:
            pass

        class ScopedB:
            pass

        def build_singleton_a(c):
            barrier.wait()
            c.resolve(ScopedB)
            return SingletonA()

        def build_scoped_a(c):
            barrier.wait()
            c.resolve(SingletonB)
            return ScopedA()

        container.register_singletons({SingletonA: build_singleton_a, SingletonB: lambda c: SingletonB()})
        container.register_scoped({ScopedA: build_scoped_a, ScopedB: lambda c: ScopedB()})
        results = []

        threads = [
            threading.Thread(target=lambda: results.append(container.resolve(SingletonA))),
            threading.Thread(target=lambda: results.append(container.resolve(ScopedA))),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert not any(thread.is_alive() for thread in threads)
        assert len(results) == 2


class TestRegistrationIdentity:
    """Test cases for registrations that share builders."""

    @pytest.mark.parametrize("lifetime", [Lifetime.SINGLETON, Lifetime.SCOPED])
    def test_same_builder_registered_twice_gives_separate_instances(self, lifetime):
        """Test that a newer registration does not reuse the older one's instance."""
        container = DIContainer()

        class Service:
            pass

        def builder(c):
            return Service()

        container.register(Service, builder, lifetime)
        first = container.resolve(Service)
        container.register(Service, builder, lifetime)

        assert container.resolve(Service) is not first

    @pytest.mark.parametrize("lifetime", [Lifetime.SINGLETON, Lifetime.SCOPED])
    def test_unhashable_callable_builder(self, lifetime):
        """Test that any callable works as a builder, hashable or not."""

        @dataclass
        class Builder:
            value: int

            def __call__(self, c):
                return [self.value]

        container = DIContainer()
        container.register(list, Builder(1), lifetime)

        first = container.resolve(list)

        assert first == [1]
        assert container.resolve(list) is first
