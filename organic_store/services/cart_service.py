# organic_store/services/cart_service.py
import logging
import uuid

from sqlmodel import Session

from organic_store.core.coupons import CouponTable
from organic_store.core.errors import NotFoundError, ValidationError
from organic_store.models.cart import Cart
from organic_store.models.product import Product
from organic_store.repositories.cart_repo import CartRepository
from organic_store.repositories.product_repo import ProductRepository
from organic_store.schemas.cart import (
    CartItemAdd,
    CartItemUpdate,
    CartRead,
    CartSummary,
    CartWithSummary,
    CouponApply,
    CouponRead,
)

logger = logging.getLogger(__name__)


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - lazily create the user's cart on first read/write
      - validate product existence, active flag and stock on add
      - snapshot the product price into the cart line
      - coupon application from the injected coupon table
      - compute the cart summary (subtotal / discount / tax / total)
    """

    def __init__(
        self,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        coupons: CouponTable,
    ):
        self.cart_repo = cart_repo
        self.product_repo = product_repo
        self.coupons = coupons

    # ---- internal helpers ----

    def _get_valid_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if not product:
            raise NotFoundError("Product not found")
        if not product.is_active:
            raise ValidationError("Product is inactive")
        return product

    @staticmethod
    def _to_read(cart: Cart) -> CartRead:
        return CartRead.model_validate(cart)

    def _with_summary(self, cart: Cart) -> CartWithSummary:
        return CartWithSummary(
            cart=self._to_read(cart),
            summary=CartSummary(**cart.summary()),
        )

    # ---- public operations ----

    def get_cart(self, session: Session, user_id: uuid.UUID) -> CartWithSummary:
        cart = self.cart_repo.get_or_create(session, user_id)
        return self._with_summary(cart)

    def add_to_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartItemAdd,
    ) -> CartRead:
        """
        Add a product to the user's cart.

        Rules:
          - product must exist and be active
          - requested quantity <= stock (merged quantity is not re-checked)
          - price snapshot is taken from current product.price
        """
        product = self._get_valid_product(session, payload.product_id)

        if product.stock < payload.quantity:
            raise ValidationError(f"Only {product.stock} items available in stock")

        cart = self.cart_repo.get_or_create(session, user_id)
        cart.add_item(product.id, payload.quantity, product.price)
        cart = self.cart_repo.save(session, cart)

        return self._to_read(cart)

    def update_quantity(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartItemUpdate,
    ) -> CartRead:
        """
        Overwrite the quantity of a line; quantity <= 0 removes it.
        Unknown products are ignored.
        """
        cart = self.cart_repo.get_or_create(session, user_id)
        cart.update_quantity(payload.product_id, payload.quantity)
        cart = self.cart_repo.save(session, cart)
        return self._to_read(cart)

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
    ) -> CartRead:
        cart = self.cart_repo.get_or_create(session, user_id)
        cart.remove_item(product_id)
        cart = self.cart_repo.save(session, cart)
        return self._to_read(cart)

    def apply_coupon(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CouponApply,
    ) -> CartWithSummary:
        """
        Apply a coupon (case-insensitive), replacing any previous one.

        Raises:
            InvalidCouponError(400): unknown code; the cart is unchanged.
        """
        cart = self.cart_repo.get_or_create(session, user_id)
        coupon = cart.apply_coupon(payload.coupon_code, self.coupons)
        cart = self.cart_repo.save(session, cart)

        logger.info("Applied coupon %s to cart %s", coupon.code, cart.id)
        return self._with_summary(cart)

    def remove_coupon(self, session: Session, user_id: uuid.UUID) -> CartRead:
        cart = self.cart_repo.get_or_create(session, user_id)
        cart.remove_coupon()
        cart = self.cart_repo.save(session, cart)
        return self._to_read(cart)

    def clear_cart(self, session: Session, user_id: uuid.UUID) -> CartRead:
        cart = self.cart_repo.get_or_create(session, user_id)
        cart.clear()
        cart = self.cart_repo.save(session, cart)
        return self._to_read(cart)

    def list_coupons(self) -> list[CouponRead]:
        coupons = []
        for code in self.coupons.codes():
            rule = self.coupons[code]
            coupons.append(
                CouponRead(
                    code=code,
                    discount=rule.discount,
                    type=rule.type,
                    description=rule.description,
                )
            )
        return coupons
