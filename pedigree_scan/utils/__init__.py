"""
Utilities package for the card scanner.

Re-exports all public functions for convenient imports.
"""

from .image import (
    load_pages,
    load_image,
    convert_pdf_to_images,
    fetch_remote_bytes,
    resolve_local_path,
    is_remote_reference,
    estimate_noise,
    denoise_image,
    deskew_image,
)

__all__ = [
    'load_pages',
    'load_image',
    'convert_pdf_to_images',
    'fetch_remote_bytes',
    'resolve_local_path',
    'is_remote_reference',
    'estimate_noise',
    'denoise_image',
    'deskew_image',
]
