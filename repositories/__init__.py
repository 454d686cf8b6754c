"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates the storage of one domain entity.
Subscription repositories implement the interface in `repositories.base`
and are injected into SubscriptionService; the service never talks to
the database directly.
"""
