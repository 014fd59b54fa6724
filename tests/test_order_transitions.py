"""Tests for order status and payment transitions."""

import pytest

from storefront.errors import ConflictError, NotFoundError, ValidationError
from storefront.models import OrderStatus, PaymentStatus
from storefront.services.order_service import OrderService

from .conftest import auth_headers


def set_status(db_session, order, status):
    order.status = status
    db_session.commit()


class TestCancelOrder:
    @pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.PREPARING])
    def test_cancel_allowed(self, client, db_session, user, place_order, status):
        order = place_order(user)
        set_status(db_session, order, status)

        response = client.put(f"/api/v1/orders/cancel/{order.order_id}", headers=auth_headers(user))

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "cancelled"
        db_session.refresh(order)
        assert order.status == OrderStatus.CANCELLED

    @pytest.mark.parametrize(
        "status",
        [OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.REJECTED, OrderStatus.CANCELLED],
    )
    def test_cancel_refused(self, db_session, user, place_order, status):
        order = place_order(user)
        set_status(db_session, order, status)

        with pytest.raises(ConflictError) as exc_info:
            OrderService.cancel_order(db_session, user, order.order_id)

        assert status.value in exc_info.value.message
        db_session.refresh(order)
        assert order.status == status

    def test_cancel_shipped_over_http(self, client, db_session, user, place_order):
        order = place_order(user)
        set_status(db_session, order, OrderStatus.SHIPPED)

        response = client.put(f"/api/v1/orders/cancel/{order.order_id}", headers=auth_headers(user))

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert "shipped" in body["message"]

    def test_cannot_cancel_someone_elses_order(self, client, user, other_user, place_order):
        order = place_order(user)

        response = client.put(f"/api/v1/orders/cancel/{order.order_id}", headers=auth_headers(other_user))

        assert response.status_code == 404

    def test_unknown_order(self, db_session, user):
        with pytest.raises(NotFoundError):
            OrderService.cancel_order(db_session, user, "ORD-missing")


class TestRejectOrder:
    def test_reject_pending(self, client, db_session, user, admin, place_order):
        order = place_order(user)

        response = client.patch(
            f"/api/v1/admin/order/reject/{order.order_id}",
            json={"rejectReason": "damaged packaging"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "rejected"
        assert data["rejectReason"] == "damaged packaging"
        db_session.refresh(order)
        assert order.reject_reason == "damaged packaging"

    def test_reason_stored_as_given(self, db_session, user, place_order):
        order = place_order(user)

        rejected = OrderService.reject_order(db_session, order.order_id, "  out of stock  ")

        assert rejected.reject_reason == "  out of stock  "

    def test_unknown_order_checked_before_reason(self, db_session):
        with pytest.raises(NotFoundError):
            OrderService.reject_order(db_session, "ORD-missing", "   ")

    @pytest.mark.parametrize(
        "status",
        [OrderStatus.DELIVERED, OrderStatus.REJECTED, OrderStatus.CANCELLED, OrderStatus.REFUNDED],
    )
    def test_reject_final_status_refused(self, db_session, user, place_order, status):
        order = place_order(user)
        set_status(db_session, order, status)

        with pytest.raises(ConflictError):
            OrderService.reject_order(db_session, order.order_id, "damaged packaging")

        db_session.refresh(order)
        assert order.status == status

    def test_reject_shipped_allowed(self, db_session, user, place_order):
        order = place_order(user)
        set_status(db_session, order, OrderStatus.SHIPPED)

        rejected = OrderService.reject_order(db_session, order.order_id, "lost in transit")

        assert rejected.status == OrderStatus.REJECTED

    @pytest.mark.parametrize("reason", [None, "", "   "])
    def test_reason_required(self, client, db_session, user, admin, place_order, reason):
        order = place_order(user)

        response = client.patch(
            f"/api/v1/admin/order/reject/{order.order_id}",
            json={"rejectReason": reason},
            headers=auth_headers(admin),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Reject reason is required"
        db_session.refresh(order)
        assert order.status == OrderStatus.PENDING


class TestUpdatePayment:
    def test_update_payment(self, client, db_session, user, admin, place_order):
        order = place_order(user)

        response = client.patch(
            f"/api/v1/admin/order/update-payment/{order.order_id}",
            json={"paymentStatus": "completed"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        assert response.json()["data"]["paymentStatus"] == "completed"

    def test_invalid_payment_status(self, client, db_session, user, admin, place_order):
        order = place_order(user)

        response = client.patch(
            f"/api/v1/admin/order/update-payment/{order.order_id}",
            json={"paymentStatus": "settled"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 400
        assert "pending, completed, failed, refunded" in response.json()["message"]
        db_session.refresh(order)
        assert order.payment_status == PaymentStatus.PENDING

    def test_missing_payment_status(self, db_session, user, place_order):
        order = place_order(user)

        with pytest.raises(ValidationError):
            OrderService.update_payment_status(db_session, order.order_id, None)

    def test_refund_does_not_touch_order_status(self, db_session, user, place_order):
        order = place_order(user)
        set_status(db_session, order, OrderStatus.DELIVERED)

        updated = OrderService.update_payment_status(db_session, order.order_id, "refunded")

        assert updated.payment_status == PaymentStatus.REFUNDED
        assert updated.status == OrderStatus.DELIVERED


class TestUpdateStatus:
    def test_admin_may_jump_states(self, client, db_session, user, admin, place_order):
        order = place_order(user)
        set_status(db_session, order, OrderStatus.DELIVERED)

        response = client.patch(
            f"/api/v1/admin/order/update-status/{order.order_id}",
            json={"status": "pending"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "pending"

    @pytest.mark.parametrize("status", ["rejected", "lost", ""])
    def test_status_outside_allow_list(self, db_session, user, place_order, status):
        order = place_order(user)

        with pytest.raises(ValidationError):
            OrderService.update_status(db_session, order.order_id, status)

        db_session.refresh(order)
        assert order.status == OrderStatus.PENDING

    def test_leaving_rejected_clears_reason(self, db_session, user, place_order):
        order = place_order(user)
        OrderService.reject_order(db_session, order.order_id, "address unreachable")

        updated = OrderService.update_status(db_session, order.order_id, "preparing")

        assert updated.status == OrderStatus.PREPARING
        assert updated.reject_reason is None

    def test_deleted_order_not_found(self, db_session, user, place_order):
        order = place_order(user)
        order.deleted_at = order.created_at
        db_session.commit()

        with pytest.raises(NotFoundError):
            OrderService.update_status(db_session, order.order_id, "shipped")


class TestAdminAccess:
    def test_non_admin_forbidden(self, client, user, place_order):
        order = place_order(user)

        response = client.patch(
            f"/api/v1/admin/order/update-status/{order.order_id}",
            json={"status": "shipped"},
            headers=auth_headers(user),
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Access denied: Admins only"

    def test_invalid_token(self, client):
        response = client.get(
            "/api/v1/admin/order/getall",
            headers={"Authorization": "Bearer not-a-token"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Unauthorized: Invalid or expired token"
