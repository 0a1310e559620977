"""
Services package.

- base_service: CRUD skeleton shared by reference-data services
- builders: ORM entity to output schema conversion
- domain: lifecycle and reference-data services
"""
