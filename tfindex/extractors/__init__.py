"""Registration recognizers and resolvers for Terraform provider packages."""
