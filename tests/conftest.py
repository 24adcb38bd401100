import pytest


@pytest.fixture()
def shop_records():
    return [
        {"shop": "A", "item": "x"},
        {"shop": "A", "item": "y"},
        {"shop": "B", "item": "z"},
    ]


@pytest.fixture()
def bill_records():
    return [
        {"item": "Milk", "price": "2.50", "shop_name": "Corner Store"},
        {"item": "Bread", "price": "1.80", "shop_name": "Corner Store"},
        {"item": "Fuel", "price": "40.00", "shop_name": "Gas & Go", "litres": "25"},
    ]
