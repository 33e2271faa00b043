import uuid


def cart_line(price, quantity=1, name='Midnight Silk Slip', product_id=None):
    return {
        'product_id': str(product_id or uuid.uuid4()),
        'name': name,
        'price': price,
        'quantity': quantity,
        'size': 'M',
    }
