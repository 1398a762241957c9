# yaopets/api/donations/test_donations_routes.py

VALID_ITEM = {
    'title': 'Ração 10kg',
    'description': 'Pacote fechado',
    'category': 'food',
    'condition': 'new',
    'location': {'address': 'Olinda, PE'},
}

def test_list_donations(client, services):
    services['donations'].list_donations.return_value = ([dict(VALID_ITEM, donation_id='d-1', donor_id='user-1',
                                                               donor_name='Ana', photos=[], available=True)], 1)

    res = client.get('/api/donations?category=food')

    item = res.get_json()['donations'][0]
    assert item['id'] == 'd-1'
    assert item['donorName'] == 'Ana'
    assert item['location'] == {'address': 'Olinda, PE'}
    services['donations'].list_donations.assert_called_once_with('food', 20, 0)

def test_list_donations_rejects_unknown_category(client):
    assert client.get('/api/donations?category=cars').status_code == 400

def test_register_item_requires_every_field(client, services, auth_headers):
    res = client.post('/api/donations', json={'title': 'Ração'}, headers=auth_headers())

    details = res.get_json()['details']
    assert res.status_code == 400
    assert {'description', 'category', 'condition', 'location'} <= set(details)
    services['donations'].create_donation.assert_not_called()

def test_register_item(client, services, auth_headers):
    services['donations'].create_donation.return_value = dict(VALID_ITEM, donation_id='d-2', donor_id='user-1',
                                                              donor_name='Anonymous', photos=[], available=True)

    res = client.post('/api/donations', json=dict(VALID_ITEM, condition='used - good'), headers=auth_headers('user-1'))

    assert res.status_code == 201
    donor_id, data = services['donations'].create_donation.call_args[0]
    assert donor_id == 'user-1'
    assert data['condition'] == 'used - good'
    assert data['location'] == {'address': 'Olinda, PE'}
