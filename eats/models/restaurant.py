# eats/models/restaurant.py
from tortoise import Model, fields


class Category(Model):
    """
    Category grouping restaurants, identified by its slug.
    """

    id = fields.IntField(pk=True)
    name = fields.CharField(max_length=100, unique=True)
    slug = fields.CharField(max_length=100, unique=True, index=True)
    cover_image = fields.CharField(max_length=500, null=True)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    restaurants: fields.ReverseRelation["Restaurant"]

    class Meta:
        table = "categories"
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.name} ({self.slug})"


class Restaurant(Model):
    """
    Restaurant owned by a single Owner user.
    """

    id = fields.IntField(pk=True)
    name = fields.CharField(max_length=255, index=True)
    address = fields.CharField(max_length=255)
    cover_image = fields.CharField(max_length=500, null=True)
    category = fields.ForeignKeyField(
        "models.Category",
        related_name="restaurants",
        null=True,
        on_delete=fields.SET_NULL
    )
    owner = fields.ForeignKeyField(
        "models.User",
        related_name="restaurants",
        on_delete=fields.CASCADE
    )
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    menu: fields.ReverseRelation["Dish"]
    orders: fields.ReverseRelation["Order"]

    class Meta:
        table = "restaurants"
        ordering = ["id"]

    def __str__(self) -> str:
        return self.name


class Dish(Model):
    """
    Dish on a restaurant's menu.

    ``options`` holds a list of ``{"name", "choices": [{"name", "extra"}], "extra"}``
    entries; ``extra`` is the surcharge added to the dish price.
    """

    id = fields.IntField(pk=True)
    restaurant = fields.ForeignKeyField(
        "models.Restaurant",
        related_name="menu",
        on_delete=fields.CASCADE
    )
    name = fields.CharField(max_length=100, index=True)
    price = fields.DecimalField(max_digits=10, decimal_places=2)
    description = fields.CharField(max_length=500)
    photo = fields.CharField(max_length=500, null=True)
    options = fields.JSONField(default=list)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "dishes"
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.name} - {self.price}"
