"""HTTP ingress and read API for shot results."""
