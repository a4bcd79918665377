"""
Cafe24 product payload normalization

The admin API returns option and image data in a few different shapes
depending on the embed parameters and API version. These helpers reduce every
known shape to the flat structure the order intake screen consumes.
"""

import math
from typing import Any, Optional

COLOR_TERMS = ("색상", "color", "컬러")


def option_groups(raw_options: Any) -> list[dict]:
    """
    Return the list of option groups from either known shape:
      - a flat list: [{option_name, option_value: [...]}, ...]
      - a wrapper:   {options: [{option_name, option_value: [...]}, ...]}
    """
    if isinstance(raw_options, list):
        return [group for group in raw_options if isinstance(group, dict)]
    if isinstance(raw_options, dict) and isinstance(raw_options.get("options"), list):
        return [group for group in raw_options["options"] if isinstance(group, dict)]
    return []


def select_option_group(groups: list[dict]) -> Optional[dict]:
    """First color-like group, else the first group"""
    for group in groups:
        name = str(group.get("option_name") or "").lower()
        if any(term in name for term in COLOR_TERMS):
            return group
    return groups[0] if groups else None


def normalize_option_value(value: dict) -> dict:
    return {
        "option_code": value.get("value_no") or value.get("value_code") or value.get("value"),
        "option_name": value.get("value_name") or value.get("option_text") or value.get("name"),
    }


def extract_options(raw_options: Any) -> list[dict]:
    group = select_option_group(option_groups(raw_options))
    if not group or not group.get("option_value"):
        return []
    return [normalize_option_value(v) for v in group["option_value"] if isinstance(v, dict)]


def extract_images(item: dict) -> dict:
    detail_image = item.get("detail_image") or item.get("product_image") or item.get("image_url") or ""
    list_image = item.get("list_image") or ""
    small_image = item.get("small_image") or ""

    images = item.get("images")
    if isinstance(images, list) and images and isinstance(images[0], dict):
        first_image = images[0]
        detail_image = detail_image or first_image.get("big") or ""
        list_image = list_image or first_image.get("medium") or ""
        small_image = small_image or first_image.get("small") or ""

    return {"detail_image": detail_image, "list_image": list_image, "small_image": small_image}


def floor_price(price: Any) -> Optional[int]:
    """Cafe24 prices arrive as decimal strings ("15000.00"); floor to an integer"""
    if price is None or isinstance(price, bool):
        return None
    try:
        number = float(price)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return math.floor(number)


def normalize_product(item: dict) -> dict:
    return {
        "product_no": item.get("product_no"),
        "product_name": item.get("product_name"),
        "price": floor_price(item.get("price")),
        "options": extract_options(item.get("options")),
        **extract_images(item),
    }
