# products/tests/test_catalog_api.py

from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from orders.services.order_service import create_order
from orders.tests.helpers import make_category, make_product, order_request
from products.models import Category, Product
from users.models import Role, User


class PublicCatalogTests(TestCase):
    """
    GUARANTEES:
    - Anyone can browse; only active products are listed
    - Names and descriptions follow the resolved locale
    - search / category / featured filters
    """

    def setUp(self):
        self.client = APIClient()
        self.url = reverse("catalog:products-list")
        self.category = make_category()
        self.mouse = make_product(name="Wireless Mouse", category=self.category)
        self.cable = make_product(name="USB-C Cable")
        self.hidden = make_product(name="Old Modem", is_active=False)

    def _names(self, res):
        return {p["name"] for p in res.data["results"]}

    def test_lists_only_active_products(self):
        res = self.client.get(self.url)

        self.assertEqual(res.status_code, 200)
        self.assertEqual(self._names(res), {"Wireless Mouse", "USB-C Cable"})

    def test_locale_query_param(self):
        res = self.client.get(self.url, {"locale": "id"})
        self.assertIn("Wireless Mouse (ID)", self._names(res))

    def test_accept_language_header(self):
        res = self.client.get(self.url, HTTP_ACCEPT_LANGUAGE="id-ID,id;q=0.9")
        self.assertIn("USB-C Cable (ID)", self._names(res))

    def test_unknown_locale_falls_back_to_english(self):
        res = self.client.get(self.url, {"locale": "fr"})
        self.assertIn("USB-C Cable", self._names(res))

    def test_search_matches_localized_name(self):
        res = self.client.get(self.url, {"search": "mouse"})
        self.assertEqual(self._names(res), {"Wireless Mouse"})

    def test_category_filter(self):
        res = self.client.get(self.url, {"category": self.category.pk})
        self.assertEqual(self._names(res), {"Wireless Mouse"})
        self.assertEqual(res.data["results"][0]["category_name"], "Accessories")

    def test_featured_filter(self):
        Product.objects.filter(pk=self.cable.pk).update(is_featured=True)
        res = self.client.get(self.url, {"featured": "true"})
        self.assertEqual(self._names(res), {"USB-C Cable"})

    def test_inactive_product_detail_is_404_for_public(self):
        res = self.client.get(reverse("catalog:products-detail", kwargs={"pk": self.hidden.pk}))
        self.assertEqual(res.status_code, 404)

    def test_include_inactive_ignored_for_public(self):
        res = self.client.get(self.url, {"include_inactive": "true"})
        self.assertNotIn("Old Modem", self._names(res))


class CatalogAdminTests(TestCase):
    """
    GUARANTEES:
    - Writes: 401 anonymous, 403 non-admin
    - Admin create/update with both locale names
    - Delete goes through the deletion guard
    """

    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(email="admin@techmart.test", role=Role.ADMIN)
        self.user = User.objects.create_user(email="user@techmart.test")
        self.list_url = reverse("catalog:products-list")
        self.payload = {
            "name_en": "Mechanical Keyboard",
            "name_id": "Keyboard Mekanik",
            "price": "49.90",
            "stock": 12,
        }

    def test_anonymous_create_is_401(self):
        res = self.client.post(self.list_url, self.payload, format="json")
        self.assertEqual(res.status_code, 401)

    def test_non_admin_create_is_403(self):
        self.client.force_authenticate(user=self.user)
        res = self.client.post(self.list_url, self.payload, format="json")
        self.assertEqual(res.status_code, 403)

    def test_admin_creates_product(self):
        self.client.force_authenticate(user=self.admin)
        res = self.client.post(self.list_url, self.payload, format="json")

        self.assertEqual(res.status_code, 201)
        product = Product.objects.get(pk=res.data["id"])
        self.assertEqual(product.name, "Mechanical Keyboard")
        self.assertEqual(product.stock, 12)

    def test_admin_create_requires_both_names(self):
        self.client.force_authenticate(user=self.admin)
        payload = dict(self.payload, name_id="")
        res = self.client.post(self.list_url, payload, format="json")
        self.assertEqual(res.status_code, 400)

    def test_admin_cannot_set_negative_stock(self):
        product = make_product(stock=3)
        self.client.force_authenticate(user=self.admin)

        res = self.client.patch(
            reverse("catalog:products-detail", kwargs={"pk": product.pk}), {"stock": -1}, format="json"
        )

        self.assertEqual(res.status_code, 400)
        product.refresh_from_db()
        self.assertEqual(product.stock, 3)

    def test_admin_lists_inactive_on_request(self):
        make_product(name="Old Modem", is_active=False)
        self.client.force_authenticate(user=self.admin)

        res = self.client.get(self.list_url, {"include_inactive": "true"})

        self.assertIn("Old Modem", {p["name_en"] for p in res.data["results"]})

    def test_delete_unreferenced_product(self):
        product = make_product()
        self.client.force_authenticate(user=self.admin)

        res = self.client.delete(reverse("catalog:products-detail", kwargs={"pk": product.pk}))

        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.data["deleted"])
        self.assertEqual(res.data["message"], "Product deleted successfully")
        self.assertFalse(Product.objects.filter(pk=product.pk).exists())

    def test_delete_referenced_product_deactivates(self):
        product = make_product(name="Webcam", stock=5)
        create_order(order_request([(product, 1)]))
        self.client.force_authenticate(user=self.admin)

        res = self.client.delete(reverse("catalog:products-detail", kwargs={"pk": product.pk}))

        self.assertEqual(res.status_code, 200)
        self.assertTrue(res.data["deactivated"])
        self.assertEqual(res.data["message"], "Product deactivated successfully (has existing orders)")

        self.client.force_authenticate(user=None)
        listing = self.client.get(self.list_url)
        self.assertNotIn("Webcam", {p["name"] for p in listing.data["results"]})

    def test_delete_unknown_product_is_404(self):
        self.client.force_authenticate(user=self.admin)
        res = self.client.delete(reverse("catalog:products-detail", kwargs={"pk": 999999}))
        self.assertEqual(res.status_code, 404)

    def test_non_admin_delete_is_403(self):
        product = make_product()
        self.client.force_authenticate(user=self.user)
        res = self.client.delete(reverse("catalog:products-detail", kwargs={"pk": product.pk}))
        self.assertEqual(res.status_code, 403)


class CategoryApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = User.objects.create_user(email="admin@techmart.test", role=Role.ADMIN)
        self.url = reverse("catalog:categories-list")

    def test_admin_creates_category_with_slug(self):
        self.client.force_authenticate(user=self.admin)
        res = self.client.post(self.url, {"name_en": "Smart Home", "name_id": "Rumah Pintar"}, format="json")

        self.assertEqual(res.status_code, 201)
        self.assertEqual(res.data["slug"], "smart-home")

    def test_duplicate_slug_rejected(self):
        make_category(name_en="Audio", name_id="Audio")
        self.client.force_authenticate(user=self.admin)

        res = self.client.post(self.url, {"name_en": "audio", "name_id": "Audio"}, format="json")

        self.assertEqual(res.status_code, 400)
        self.assertEqual(Category.objects.count(), 1)

    def test_public_list_is_localized(self):
        make_category(name_en="Accessories", name_id="Aksesori")
        res = self.client.get(self.url, {"locale": "id"})
        self.assertEqual(res.data["results"][0]["name"], "Aksesori")
