"""Resolver package for the GraphQL schema.

Functions here are called from the root Query and Mutation types; each one
performs a single store operation and shapes the result into GraphQL types.
"""
