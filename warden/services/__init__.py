"""Business logic: credential store, auth flows, authorization and administration."""
