"""Domain Layer: value objects, errors and the ports the infrastructure implements."""
