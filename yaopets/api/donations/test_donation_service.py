# yaopets/api/donations/test_donation_service.py
import pytest

from yaopets.api.donations.services import DonationService

ITEM = {
    'title': 'Coleira',
    'description': 'Tamanho M',
    'category': 'accessory',
    'condition': 'almost new',
    'location': {'address': 'Recife, PE'},
}

def test_create_donation_uses_donor_name(firestore_db):
    firestore_db.set_document('users', {'user_id': 'user-1', 'username': 'ana', 'name': 'Ana Souza'})
    service = DonationService(db=firestore_db.client)

    item = service.create_donation('user-1', ITEM)

    assert item['donor_name'] == 'Ana Souza'
    assert item['category'] == 'accessory'
    assert item['condition'] == 'almost new'
    assert item['location'] == {'address': 'Recife, PE'}
    assert item['available'] is True
    firestore_db.collection('donations').document.assert_called_with(item['donation_id'])
    firestore_db.collection('donations').document.return_value.set.assert_called_once_with(item)

def test_create_donation_falls_back_to_anonymous(firestore_db):
    firestore_db.set_document('users', {'user_id': 'user-1'})
    service = DonationService(db=firestore_db.client)

    assert service.create_donation('user-1', ITEM)['donor_name'] == 'Anonymous'

def test_create_donation_for_missing_donor(firestore_db):
    firestore_db.set_document('users', None)
    service = DonationService(db=firestore_db.client)

    with pytest.raises(ValueError):
        service.create_donation('ghost', ITEM)
