"""
Image loading, PDF conversion, denoising, and deskewing utilities.
"""

import io
import os
import logging
from typing import List, Optional, Union
from urllib.parse import unquote, urlparse

import cv2
import numpy as np
import requests
from PIL import Image
import pypdfium2 as pdfium

logger = logging.getLogger(__name__)

_PDF_MAGIC = b'%PDF'


def is_remote_reference(image_ref: str) -> bool:
    return urlparse(image_ref).scheme in ('http', 'https')


def resolve_local_path(image_ref: str) -> str:
    """Turn a file:// URI into a filesystem path; plain paths pass through."""
    parsed = urlparse(image_ref)
    if parsed.scheme == 'file':
        return unquote(parsed.path)
    return image_ref


def fetch_remote_bytes(url: str, timeout: float = 30.0) -> Optional[bytes]:
    """Download an image (or PDF) over HTTP(S)."""
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        return response.content
    except requests.RequestException as e:
        logger.error("Error fetching image %s: %s", url, e)
        return None


def load_image(source: Union[str, bytes]):
    """Loads an image from a file path or raw bytes."""
    try:
        if isinstance(source, bytes):
            source = io.BytesIO(source)
        image = Image.open(source).convert("RGB")
        return image
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.error("Error loading image: %s", e)
        return None


def convert_pdf_to_images(source: Union[str, bytes], dpi=200):
    """Converts a PDF file (path or bytes) to a list of PIL Images."""
    images = []
    try:
        pdf = pdfium.PdfDocument(source)
        for i in range(len(pdf)):
            page = pdf[i]
            bitmap = page.render(scale=dpi/72)
            pil_image = bitmap.to_pil()
            images.append(pil_image.convert("RGB"))
    except (pdfium.PdfiumError, OSError, ValueError) as e:
        logger.error("Error converting PDF: %s", e)
    return images


def _looks_like_pdf(source: Union[str, bytes]) -> bool:
    if isinstance(source, bytes):
        return source.startswith(_PDF_MAGIC)
    return os.path.splitext(source)[1].lower() == '.pdf'


def estimate_noise(image_np):
    """
    Estimates noise level using a simple median blur difference method.
    Higher score means more noise.
    """
    try:
        gray = cv2.cvtColor(image_np, cv2.COLOR_RGB2GRAY)

        h, w = gray.shape
        if w > 1000:
            scale = 1000 / w
            gray = cv2.resize(gray, (0, 0), fx=scale, fy=scale)

        median = cv2.medianBlur(gray, 3)
        diff = cv2.absdiff(gray, median)
        return float(np.mean(diff))
    except cv2.error:
        return 999.0


def denoise_image(image, noise_threshold=0.8):
    """
    Applies simple denoising to an image using OpenCV if noise is detected.
    Phone photos of cards pick up sensor speckle that Tesseract reads as dots.
    Clean scans below ``noise_threshold`` are returned as-is.
    """
    try:
        img_np = np.array(image)

        noise_score = estimate_noise(img_np)
        if noise_score < noise_threshold:
            return image
        logger.debug("Noise score %.2f, denoising card", noise_score)

        img_bgr = cv2.cvtColor(img_np, cv2.COLOR_RGB2BGR)
        denoised_bgr = cv2.fastNlMeansDenoisingColored(img_bgr, None, 10, 10, 7, 21)
        denoised_rgb = cv2.cvtColor(denoised_bgr, cv2.COLOR_BGR2RGB)
        return Image.fromarray(denoised_rgb)
    except cv2.error as e:
        logger.error("Error denoising image: %s", e)
        return image


def deskew_image(image, angle_threshold=0.5, max_angle=15.0):
    """
    Detect and correct card skew using Hough line detection.

    The printed field rules on a pedigree card give plenty of long
    horizontal lines to estimate the rotation from.

    Args:
        image: PIL Image to deskew
        angle_threshold: Minimum skew angle (degrees) to trigger correction
        max_angle: Maximum correction angle (ignore if skew seems too extreme)

    Returns:
        Deskewed PIL Image (or original if no significant skew detected)
    """
    try:
        img_np = np.array(image.convert('L'))
        h, w = img_np.shape

        edges = cv2.Canny(img_np, 50, 150, apertureSize=3)

        max_line_gap = max(5, w // 100)
        lines = cv2.HoughLinesP(edges, 1, np.pi/180, threshold=50,
                                minLineLength=w//4, maxLineGap=max_line_gap)

        if lines is None or len(lines) < 10:
            return image

        angles = []
        for line in lines:
            x1, y1, x2, y2 = line[0]
            if abs(x2 - x1) > 10:
                angle = np.degrees(np.arctan2(y2 - y1, x2 - x1))
                if -30 < angle < 30:
                    angles.append(angle)

        if len(angles) < 5:
            return image

        median_angle = np.median(angles)

        if abs(median_angle) < angle_threshold or abs(median_angle) > max_angle:
            return image

        logger.debug("Detected skew: %.2f degrees, applying correction", median_angle)

        img_color = np.array(image)
        center = (w // 2, h // 2)
        rotation_matrix = cv2.getRotationMatrix2D(center, median_angle, 1.0)

        cos = np.abs(rotation_matrix[0, 0])
        sin = np.abs(rotation_matrix[0, 1])
        new_w = int((h * sin) + (w * cos))
        new_h = int((h * cos) + (w * sin))

        rotation_matrix[0, 2] += (new_w / 2) - center[0]
        rotation_matrix[1, 2] += (new_h / 2) - center[1]

        rotated = cv2.warpAffine(img_color, rotation_matrix, (new_w, new_h),
                                 borderMode=cv2.BORDER_CONSTANT,
                                 borderValue=(255, 255, 255))

        return Image.fromarray(rotated)

    except cv2.error as e:
        logger.warning("Deskew failed: %s", e)
        return image


def load_pages(image_ref: str, dpi: int = 200, timeout: float = 30.0,
               denoise: bool = True, deskew: bool = True) -> List[Image.Image]:
    """
    Load every page behind an image reference, ready for recognition.

    Accepts a filesystem path, a file:// URI or an http(s) URL, pointing at
    an image or a PDF.  Returns an empty list when nothing could be loaded;
    the reason is logged.
    """
    source: Union[str, bytes, None]
    if is_remote_reference(image_ref):
        source = fetch_remote_bytes(image_ref, timeout=timeout)
    else:
        source = resolve_local_path(image_ref)
        if not os.path.exists(source):
            logger.error("Image file not found: %s", source)
            source = None

    if source is None:
        return []

    if _looks_like_pdf(source):
        pages = convert_pdf_to_images(source, dpi=dpi)
    else:
        image = load_image(source)
        pages = [image] if image is not None else []

    if denoise:
        pages = [denoise_image(p) for p in pages]
    if deskew:
        pages = [deskew_image(p) for p in pages]

    return pages
