"""Image storage module.

Images live in one flat directory (the storage root). This package covers
everything that touches it:

- paths: sanitizing request paths and enforcing root containment
- mime: extension → Content-Type lookup
- service: ImageStore (list / write / delete)
- router: streaming stored files over HTTP

Allowed extensions: jpg, jpeg, png, gif, webp, svg.
"""
