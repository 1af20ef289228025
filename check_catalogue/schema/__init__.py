"""Bundled JSON Schema documents.

``definition.json`` describes the on-disk shape of template and workflow
definitions. It is loaded through :class:`check_catalogue.models.json_schema_loader.SchemaDocument`.
"""
