from provider_availability.services.dispatch.dispatch_resolver_service import DispatchResolverService

__all__ = ["DispatchResolverService"]
