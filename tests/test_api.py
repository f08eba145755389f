"""
API tests for the catalog endpoints.

Run with: pytest tests/test_api.py -v
"""

import pytest

from catalog.services import ProductSearchService
from conftest import RATING_DESC

PRODUCTS = "/api/v1/products"
FILTERS = "/api/v1/filter/products"


def names(response):
    return [p["name"] for p in response.json()["products"]]


class TestHealth:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "operational"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"service": "healthy", "database": "healthy"}


class TestFindProducts:
    def test_defaults(self, client):
        response = client.get(PRODUCTS)
        assert response.status_code == 200
        data = response.json()
        assert data["page_number"] == 0
        assert data["page_size"] == 12
        assert data["total_elements"] == 7
        assert data["is_first"] and data["is_last"]
        assert data["min_price"] == 149.99
        assert data["max_price"] == 1649.0
        assert names(response)[0] == "MacBook Air"

    def test_product_fields(self, client):
        response = client.get(PRODUCTS, params={"name": "bravia"})
        product = response.json()["products"][0]
        assert product["category"] == "TV"
        assert product["average_rating"] == 4.0
        assert product["screen_size"] == "55"

    def test_repeated_and_comma_separated_values(self, client):
        repeated = client.get(PRODUCTS, params=[("brand", "apple"), ("brand", "Sony")])
        comma = client.get(PRODUCTS, params={"brand": "apple, Sony"})
        assert repeated.status_code == comma.status_code == 200
        assert names(repeated) == names(comma) == ["MacBook Air", "iPhone 15", "Bravia XR", "WH-1000XM5"]

    def test_combined_filters(self, client):
        response = client.get(PRODUCTS, params={"category": "Cellular", "color": "black", "memory": "128gb"})
        assert names(response) == ["Galaxy S24"]

    def test_price_range(self, client):
        response = client.get(PRODUCTS, params={"minPrice": "400", "maxPrice": "1100", "sortBy": "price"})
        assert response.status_code == 200
        assert names(response) == ["Galaxy S24", "iPhone 15", "MacBook Air"]
        assert response.json()["min_price"] == 400.0
        assert response.json()["max_price"] == 1100.0

    @pytest.mark.parametrize("sort_by", ["rating", "ratings", "Ratings"])
    def test_rating_sort(self, client, sort_by):
        response = client.get(PRODUCTS, params={"sortBy": sort_by, "sortDir": "DESC"})
        assert response.status_code == 200
        assert names(response) == RATING_DESC

    def test_paging(self, client):
        response = client.get(PRODUCTS, params={"pageNumber": 1, "pageSize": 3, "sortBy": "rating", "sortDir": "desc"})
        data = response.json()
        assert names(response) == RATING_DESC[3:6]
        assert data["total_pages"] == 3
        assert not data["is_first"] and not data["is_last"]

    def test_empty_page(self, client):
        response = client.get(PRODUCTS, params={"brand": "Apple", "minPrice": "950", "maxPrice": "1000"})
        assert response.status_code == 200
        data = response.json()
        assert data["products"] == []
        assert data["total_pages"] == 0
        assert data["is_last"]

    def test_min_price_above_every_price(self, client):
        response = client.get(PRODUCTS, params={"minPrice": "2000"})
        assert response.status_code == 200
        data = response.json()
        assert data["products"] == []
        assert data["total_elements"] == 0
        assert (data["min_price"], data["max_price"]) == (1649.0, 1649.0)

    def test_max_price_below_every_price(self, client):
        response = client.get(PRODUCTS, params={"category": "Laptop", "maxPrice": "500"})
        assert response.status_code == 200
        assert response.json()["products"] == []


class TestFindProductsErrors:
    def _assert_error(self, response, status, parameter):
        assert response.status_code == status
        body = response.json()
        assert body["status"] == status
        assert body["parameter"] == parameter
        assert body["endpoint"] == "find_products"
        assert body["method"] == "GET"
        assert body["path"] == PRODUCTS
        assert body["message"]
        assert body["timestamp"]

    def test_unknown_parameter(self, client):
        response = client.get(PRODUCTS, params={"brand": "Apple", "foo": "bar"})
        self._assert_error(response, 400, "foo")
        assert "foo" in response.json()["message"]

    def test_snake_case_parameter_is_unknown(self, client):
        self._assert_error(client.get(PRODUCTS, params={"page_size": "5"}), 400, "page_size")

    @pytest.mark.parametrize("params,parameter", [
        ({"pageNumber": "-1"}, "pageNumber"),
        ({"pageNumber": "one"}, "pageNumber"),
        ({"pageSize": "0"}, "pageSize"),
        ({"pageSize": "1000"}, "pageSize"),
        ({"sortDir": "sideways"}, "sortDir"),
        ({"sortBy": "weight"}, "sortBy"),
        ({"minPrice": "cheap"}, "minPrice"),
        ({"maxPrice": "-5"}, "maxPrice"),
        ({"minPrice": "500", "maxPrice": "100"}, "minPrice"),
    ])
    def test_bad_values(self, client, params, parameter):
        self._assert_error(client.get(PRODUCTS, params=params), 400, parameter)

    def test_page_past_end(self, client):
        self._assert_error(client.get(PRODUCTS, params={"pageNumber": "1"}), 400, "pageNumber")

    def test_no_matching_records(self, client):
        self._assert_error(client.get(PRODUCTS, params={"brand": "Nokia"}), 404, "price")

    def test_internal_error_is_opaque(self, client, monkeypatch):
        def explode(self, criteria, page):
            raise RuntimeError("password=hunter2 at db-primary:5432")

        monkeypatch.setattr(ProductSearchService, "find_products", explode)
        response = client.get(PRODUCTS)
        assert response.status_code == 500
        body = response.json()
        assert body["exception"] == "RuntimeError"
        assert body["internal_server_error"] == "Contact Admin"
        assert "hunter2" not in response.text
        assert "db-primary" not in response.text


class TestGetProduct:
    def test_found(self, client, catalog):
        response = client.get(f"{PRODUCTS}/{catalog['WH-1000XM5']}")
        assert response.status_code == 200
        assert response.json()["average_rating"] == 5.0
        assert response.json()["category"] == "Headphone"

    def test_missing(self, client):
        response = client.get(f"{PRODUCTS}/9999")
        assert response.status_code == 404
        body = response.json()
        assert body["endpoint"] == "get_product"
        assert body["message"] == "Entity Product with id = 9999 not found!"


class TestFilterOptions:
    def test_whole_catalog(self, client):
        response = client.get(FILTERS)
        assert response.status_code == 200
        data = response.json()
        assert data["brands"] == ["Apple", "Lenovo", "Samsung", "Sony"]
        assert data["prices"] == [149.99, 1649.0]
        assert data["categories"] == ["Cellular", "Headphone", "Laptop", "TV"]

    def test_filtered(self, client):
        response = client.get(FILTERS, params={"category": "Laptop", "maxPrice": "1200"})
        assert response.json()["brands"] == ["Apple"]

    def test_pagination_parameters_rejected(self, client):
        response = client.get(FILTERS, params={"pageNumber": "0"})
        assert response.status_code == 400
        assert response.json()["parameter"] == "pageNumber"
        assert response.json()["endpoint"] == "get_filter_options"

    def test_no_matching_records(self, client):
        assert client.get(FILTERS, params={"color": "purple"}).status_code == 404
