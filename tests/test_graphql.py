"""
Schema-level tests: operations run straight through ``schema.execute`` with a
hand-built context, no HTTP involved.
"""

from eats.graphql import Context, schema

CREATE_RESTAURANT = """
mutation Create($name: String!, $category: String!) {
  createRestaurant(input: {name: $name, categoryName: $category}) {
    ok
    error
    errorKind
    restaurantId
  }
}
"""

DELETE_RESTAURANT = """
mutation Delete($id: Int!) {
  deleteRestaurant(input: {restaurantId: $id}) { ok error errorKind }
}
"""


async def execute(query, db, user=None, **variables):
    return await schema.execute(
        query, variable_values=variables, context_value=Context(db=db, user=user)
    )


async def test_create_restaurant_and_list(db, owner):
    created = await execute(CREATE_RESTAURANT, db, owner, name="Pizza Palace", category="Italian Food")
    assert created.errors is None
    payload = created.data["createRestaurant"]
    assert payload["ok"] is True
    assert payload["error"] is None
    assert payload["errorKind"] is None

    listed = await execute(
        """
        {
          restaurants(input: {page: 1}) {
            ok page totalPages totalResults
            results { id name category { slug restaurantCount } owner { email } }
          }
        }
        """,
        db,
    )
    assert listed.errors is None
    output = listed.data["restaurants"]
    assert output["totalPages"] == 1
    assert output["totalResults"] == 1
    assert output["results"] == [
        {
            "id": payload["restaurantId"],
            "name": "Pizza Palace",
            "category": {"slug": "italian-food", "restaurantCount": 1},
            "owner": {"email": "owner@eats.io"},
        }
    ]


async def test_owner_only_mutation_rejects_clients(db, client_user):
    result = await execute(CREATE_RESTAURANT, db, client_user, name="Pizza Palace", category="Italian")
    assert result.data is None
    assert result.errors[0].message == "Only restaurant owners can do that."


async def test_anonymous_me_is_rejected(db):
    result = await execute("{ me { email } }", db)
    assert result.errors[0].message == "You must be logged in."


async def test_me(db, driver):
    result = await execute("{ me { email role verified } }", db, driver)
    assert result.data["me"] == {"email": "driver@eats.io", "role": "DELIVERY", "verified": False}


async def test_delete_by_non_owner_reports_forbidden(db, owner, other_owner):
    created = await execute(CREATE_RESTAURANT, db, owner, name="Pizza Palace", category="Italian")
    restaurant_id = created.data["createRestaurant"]["restaurantId"]

    result = await execute(DELETE_RESTAURANT, db, other_owner, id=restaurant_id)
    assert result.data["deleteRestaurant"] == {
        "ok": False,
        "error": "You can't do that.",
        "errorKind": "FORBIDDEN",
    }


async def test_validation_errors_surface_in_output(db, owner):
    result = await execute(CREATE_RESTAURANT, db, owner, name="Pie", category="Bakery")
    payload = result.data["createRestaurant"]
    assert payload["ok"] is False
    assert payload["errorKind"] == "VALIDATION"
    assert payload["restaurantId"] is None


async def test_search_and_category_queries(db, owner):
    await execute(CREATE_RESTAURANT, db, owner, name="Pizza Palace", category="Italian")
    await execute(CREATE_RESTAURANT, db, owner, name="Burger Barn", category="American")

    search = await execute(
        '{ searchRestaurant(input: {query: "piz"}) { ok totalResults restaurants { name } } }', db
    )
    assert search.data["searchRestaurant"]["restaurants"] == [{"name": "Pizza Palace"}]

    category = await execute(
        '{ category(input: {slug: "american"}) { ok totalPages category { name } restaurants { name } } }',
        db,
    )
    assert category.data["category"] == {
        "ok": True,
        "totalPages": 1,
        "category": {"name": "american"},
        "restaurants": [{"name": "Burger Barn"}],
    }

    missing = await execute('{ category(input: {slug: "thai"}) { ok errorKind } }', db)
    assert missing.data["category"] == {"ok": False, "errorKind": "NOT_FOUND"}


async def test_order_flow(db, owner, client_user, driver):
    created = await execute(CREATE_RESTAURANT, db, owner, name="Pizza Palace", category="Italian")
    restaurant_id = created.data["createRestaurant"]["restaurantId"]

    dish = await execute(
        """
        mutation Dish($rid: Int!) {
          createDish(input: {
            restaurantId: $rid, name: "Margherita", price: 9.5,
            description: "Tomato and mozzarella",
            options: [{name: "Size", choices: [{name: "L", extra: 2}, {name: "M"}]}]
          }) { ok dishId }
        }
        """,
        db,
        owner,
        rid=restaurant_id,
    )
    dish_id = dish.data["createDish"]["dishId"]

    order = await execute(
        """
        mutation Order($rid: Int!, $did: Int!) {
          createOrder(input: {restaurantId: $rid, items: [
            {dishId: $did, options: [{name: "Size", choice: "L"}]},
            {dishId: $did}
          ]}) { ok error orderId }
        }
        """,
        db,
        client_user,
        rid=restaurant_id,
        did=dish_id,
    )
    assert order.errors is None
    assert order.data["createOrder"]["ok"] is True, order.data["createOrder"]["error"]
    order_id = order.data["createOrder"]["orderId"]

    taken = await execute(
        "mutation T($id: Int!) { takeOrder(input: {orderId: $id}) { ok } }", db, driver, id=order_id
    )
    assert taken.data["takeOrder"]["ok"] is True

    fetched = await execute(
        "query G($id: Int!) { getOrder(input: {orderId: $id}) { ok order { total status driver { email } } } }",
        db,
        client_user,
        id=order_id,
    )
    assert fetched.data["getOrder"]["order"] == {
        "total": 21.0,
        "status": "PENDING",
        "driver": {"email": "driver@eats.io"},
    }
