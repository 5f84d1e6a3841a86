"""HTTP interface: routers and schemas."""
