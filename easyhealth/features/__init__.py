"""Feature packages. Each owns its models, schemas, service and router."""
