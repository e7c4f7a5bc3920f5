"""Job board core: types, filtering, pagination, repositories and services."""
