"""Tests for order listings and detail views."""

from storefront.models import OrderStatus, PaymentStatus

from .conftest import auth_headers


class TestUserOrderListing:
    def test_lists_only_own_orders_newest_first(self, client, user, other_user, place_order):
        first = place_order(user)
        second = place_order(user)
        place_order(other_user)

        response = client.get("/api/v1/orders/getall", headers=auth_headers(user))

        assert response.status_code == 200
        data = response.json()["data"]
        assert [o["orderId"] for o in data["orders"]] == [second.order_id, first.order_id]
        assert data["pagination"] == {"total": 2, "page": 1, "limit": 10, "totalPages": 1}

    def test_pagination(self, client, user, place_order):
        orders = [place_order(user) for _ in range(5)]

        response = client.get(
            "/api/v1/orders/getall",
            params={"page": 2, "limit": 2},
            headers=auth_headers(user),
        )

        data = response.json()["data"]
        assert [o["orderId"] for o in data["orders"]] == [orders[2].order_id, orders[1].order_id]
        assert data["pagination"] == {"total": 5, "page": 2, "limit": 2, "totalPages": 3}

    def test_status_filter(self, client, db_session, user, place_order):
        place_order(user)
        shipped = place_order(user)
        shipped.status = OrderStatus.SHIPPED
        db_session.commit()

        response = client.get(
            "/api/v1/orders/getall",
            params={"status": "shipped"},
            headers=auth_headers(user),
        )

        orders = response.json()["data"]["orders"]
        assert [o["orderId"] for o in orders] == [shipped.order_id]

    def test_invalid_status_filter(self, client, user):
        response = client.get(
            "/api/v1/orders/getall",
            params={"status": "lost"},
            headers=auth_headers(user),
        )

        assert response.status_code == 400

    def test_search_is_case_insensitive_substring(self, client, user, place_order):
        target = place_order(user)
        place_order(user)
        fragment = target.order_id[4:12].upper()

        response = client.get(
            "/api/v1/orders/getall",
            params={"search": fragment},
            headers=auth_headers(user),
        )

        orders = response.json()["data"]["orders"]
        assert [o["orderId"] for o in orders] == [target.order_id]

    def test_soft_deleted_orders_hidden(self, client, db_session, user, place_order):
        order = place_order(user)
        order.deleted_at = order.created_at
        db_session.commit()

        listing = client.get("/api/v1/orders/getall", headers=auth_headers(user))
        detail = client.get(f"/api/v1/orders/order/{order.order_id}", headers=auth_headers(user))

        assert listing.json()["data"]["orders"] == []
        assert detail.status_code == 404


class TestOrderDetail:
    def test_product_display_resolved_at_read_time(self, client, db_session, user, place_order):
        order = place_order(user, price=40.0)
        product = order.items[0].product
        product.name = "Renamed Tee"
        product.price = 99.0
        db_session.commit()

        response = client.get(f"/api/v1/orders/order/{order.order_id}", headers=auth_headers(user))

        assert response.status_code == 200
        item = response.json()["data"]["items"][0]
        assert item["product"]["name"] == "Renamed Tee"
        assert item["product"]["image"].startswith("https://img.storefront.io/")
        assert item["price"] == 40.0

    def test_other_users_order_not_found(self, client, user, other_user, place_order):
        order = place_order(user)

        response = client.get(f"/api/v1/orders/order/{order.order_id}", headers=auth_headers(other_user))

        assert response.status_code == 404
        assert response.json()["success"] is False


class TestAdminOrderQueries:
    def test_lists_all_orders_with_user_info(self, client, user, other_user, admin, place_order):
        place_order(user)
        place_order(other_user)

        response = client.get("/api/v1/admin/order/getall", headers=auth_headers(admin))

        assert response.status_code == 200
        orders = response.json()["data"]["orders"]
        assert len(orders) == 2
        assert {o["user"]["email"] for o in orders} == {user.email, other_user.email}
        assert set(orders[0]["user"]) == {"id", "uid", "fullname", "email"}

    def test_payment_status_filter(self, client, db_session, user, admin, place_order):
        place_order(user)
        paid = place_order(user)
        paid.payment_status = PaymentStatus.COMPLETED
        db_session.commit()

        response = client.get(
            "/api/v1/admin/order/getall",
            params={"paymentStatus": "completed"},
            headers=auth_headers(admin),
        )

        orders = response.json()["data"]["orders"]
        assert [o["orderId"] for o in orders] == [paid.order_id]

    def test_admin_detail_includes_user_and_products(self, client, user, admin, place_order):
        order = place_order(user, quantity=3)

        response = client.get(f"/api/v1/admin/order/get/{order.order_id}", headers=auth_headers(admin))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user"]["phone"] == user.phone
        assert data["items"][0]["quantity"] == 3
        assert data["items"][0]["product"]["id"] == order.items[0].product_id

    def test_admin_detail_missing(self, client, admin):
        response = client.get("/api/v1/admin/order/get/ORD-nope", headers=auth_headers(admin))

        assert response.status_code == 404
