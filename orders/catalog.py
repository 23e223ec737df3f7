"""Construction material catalog offered on the order form"""
from decimal import Decimal


MATERIAL_CATALOG = [
    {'id': 'cement-01', 'name': 'Portland Cement 50kg', 'unit_price': Decimal('250.00')},
    {'id': 'cement-02', 'name': 'Mortar 50kg', 'unit_price': Decimal('220.00')},
    {'id': 'lime-01', 'name': 'Hydrated Lime 25kg', 'unit_price': Decimal('80.00')},
    {'id': 'rebar-01', 'name': 'Rebar 3/8" 12m', 'unit_price': Decimal('180.00')},
    {'id': 'rebar-02', 'name': 'Rebar 1/2" 12m', 'unit_price': Decimal('320.00')},
    {'id': 'rebar-03', 'name': 'Rebar 5/8" 12m', 'unit_price': Decimal('500.00')},
    {'id': 'wire-rod-01', 'name': 'Wire Rod 1/4" (roll)', 'unit_price': Decimal('1200.00')},
    {'id': 'wire-01', 'name': 'Annealed Tie Wire (kg)', 'unit_price': Decimal('40.00')},
    {'id': 'brick-01', 'name': 'Red Brick (thousand)', 'unit_price': Decimal('3500.00')},
    {'id': 'block-01', 'name': 'Hollow Block 12x20x40cm', 'unit_price': Decimal('14.00')},
    {'id': 'block-02', 'name': 'Solid Block 10x20x40cm', 'unit_price': Decimal('12.00')},
    {'id': 'sand-01', 'name': 'Sand (m3)', 'unit_price': Decimal('400.00')},
    {'id': 'gravel-01', 'name': 'Gravel (m3)', 'unit_price': Decimal('450.00')},
    {'id': 'tile-adhesive-01', 'name': 'Tile Adhesive 20kg', 'unit_price': Decimal('150.00')},
    {'id': 'plaster-01', 'name': 'Plaster 25kg', 'unit_price': Decimal('90.00')},
]

_BY_ID = {material['id']: material for material in MATERIAL_CATALOG}


def get_material(material_id):
    return _BY_ID.get(material_id)
