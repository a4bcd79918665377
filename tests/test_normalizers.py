from offline_orders.domain.catalog.normalizers import (
    extract_images,
    extract_options,
    floor_price,
    normalize_product,
    option_groups,
    select_option_group,
)


def _group(name, values):
    return {"option_name": name, "option_value": values}


class TestOptionGroups:
    def test_flat_list_shape(self):
        groups = [_group("Color", [])]
        assert option_groups(groups) == groups

    def test_wrapped_shape(self):
        groups = [_group("Color", [])]
        assert option_groups({"has_option": "T", "options": groups}) == groups

    def test_unknown_shapes_yield_no_groups(self):
        assert option_groups(None) == []
        assert option_groups("F") == []
        assert option_groups({"options": "none"}) == []


class TestSelectOptionGroup:
    def test_prefers_color_group_case_insensitive(self):
        size = _group("Size", [])
        color = _group("COLOR", [])
        assert select_option_group([size, color]) is color

    def test_matches_korean_color_terms(self):
        size = _group("사이즈", [])
        color = _group("색상 선택", [])
        assert select_option_group([size, color]) is color
        colour = _group("컬러", [])
        assert select_option_group([size, colour]) is colour

    def test_falls_back_to_first_group_when_no_color(self):
        size = _group("Size", [])
        assert select_option_group([size]) is size

    def test_empty(self):
        assert select_option_group([]) is None


class TestExtractOptions:
    def test_only_size_group_is_still_returned(self):
        options = extract_options([_group("Size", [{"value_no": 1, "value_name": "S"}, {"value_no": 2, "value_name": "M"}])])
        assert options == [
            {"option_code": 1, "option_name": "S"},
            {"option_code": 2, "option_name": "M"},
        ]

    def test_value_field_fallback_chain(self):
        options = extract_options(
            {
                "options": [
                    _group(
                        "Color",
                        [
                            {"value_no": "V1", "value_code": "C1", "value": "raw1", "value_name": "Black"},
                            {"value_code": "C2", "value": "raw2", "option_text": "White"},
                            {"value": "raw3", "name": "Navy"},
                        ],
                    )
                ]
            }
        )
        assert options == [
            {"option_code": "V1", "option_name": "Black"},
            {"option_code": "C2", "option_name": "White"},
            {"option_code": "raw3", "option_name": "Navy"},
        ]

    def test_group_without_values(self):
        assert extract_options([{"option_name": "Color"}]) == []


class TestExtractImages:
    def test_explicit_fields_win(self):
        images = extract_images(
            {
                "detail_image": "d.jpg",
                "list_image": "l.jpg",
                "small_image": "s.jpg",
                "images": [{"big": "b.jpg", "medium": "m.jpg", "small": "x.jpg"}],
            }
        )
        assert images == {"detail_image": "d.jpg", "list_image": "l.jpg", "small_image": "s.jpg"}

    def test_images_array_fills_missing_fields(self):
        images = extract_images(
            {"list_image": "l.jpg", "images": [{"big": "b.jpg", "medium": "m.jpg", "small": "x.jpg"}]}
        )
        assert images == {"detail_image": "b.jpg", "list_image": "l.jpg", "small_image": "x.jpg"}

    def test_generic_image_fields(self):
        assert extract_images({"product_image": "p.jpg"})["detail_image"] == "p.jpg"
        assert extract_images({"image_url": "u.jpg"})["detail_image"] == "u.jpg"

    def test_nothing_available(self):
        assert extract_images({}) == {"detail_image": "", "list_image": "", "small_image": ""}


def test_floor_price():
    assert floor_price("15000.90") == 15000
    assert floor_price(9900) == 9900
    assert floor_price("abc") is None
    assert floor_price(None) is None


def test_normalize_product():
    item = normalize_product(
        {
            "product_no": 101,
            "product_name": "데일리 코튼 티셔츠",
            "price": "29000.00",
            "options": [_group("Size", [{"value_no": 1, "value_name": "M"}]), _group("색상", [{"value_no": 7, "value_name": "Black"}])],
            "images": [{"big": "b.jpg", "medium": "m.jpg", "small": "s.jpg"}],
        }
    )
    assert item == {
        "product_no": 101,
        "product_name": "데일리 코튼 티셔츠",
        "price": 29000,
        "options": [{"option_code": 7, "option_name": "Black"}],
        "detail_image": "b.jpg",
        "list_image": "m.jpg",
        "small_image": "s.jpg",
    }
