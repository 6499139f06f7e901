import pytest
from datetime import datetime, timezone
from models import Campaign, CampaignStatusEnum, ChartData, ChartTypeEnum, User, validate_series_lengths

def test_campaign_to_dict_uses_wire_keys():
    campaign = Campaign(id='cp009', name='Retargeting', channel='Google Ads', spend='10.00', roi='1.50',
                        created_at=datetime(2024, 1, 15, tzinfo=timezone.utc))
    assert campaign.to_dict() == {
        'id': 'cp009', 'name': 'Retargeting', 'channel': 'Google Ads', 'spend': '10.00',
        'conversions': 0, 'roi': '1.50', 'status': 'active', 'createdAt': '2024-01-15T00:00:00.000Z',
    }

def test_campaign_apply_patch_returns_new_object():
    campaign = Campaign(id='cp009', name='Retargeting', channel='Google Ads', spend='10.00', roi='1.50')
    patched = campaign.apply_patch({'spend': '20.00', 'status': CampaignStatusEnum.COMPLETED.value})
    assert patched is not campaign
    assert campaign.spend == '10.00'
    assert patched.spend == '20.00'
    assert patched.status == 'completed'
    assert patched.created_at == campaign.created_at

def test_enum_values():
    assert [status.value for status in CampaignStatusEnum] == ['active', 'paused', 'completed']
    assert [chart_type.value for chart_type in ChartTypeEnum] == ['line', 'bar', 'pie']

@pytest.mark.parametrize("data", [
    {},
    {'labels': ['A'], 'datasets': []},
    {'labels': ['A'], 'datasets': [{'label': 'x'}]},
    {'labels': ['A', 'B'], 'datasets': [{'data': [1, 2]}, {'data': [1]}]},
    {'labels': 'AB', 'datasets': [{'data': [1, 2]}]},
])
def test_validate_series_lengths_rejects(data):
    with pytest.raises(ValueError):
        validate_series_lengths(data)

def test_chart_data_accepts_aligned_series():
    chart = ChartData('c1', 'bar', {'labels': ['A', 'B'], 'datasets': [{'data': [1, 2]}, {'label': 'y', 'data': [3, 4]}]})
    assert chart.to_dict()['data']['datasets'][1]['data'] == [3, 4]

def test_user_without_password_never_matches():
    user = User('u1', 'nobody')
    assert user.password_hash is None
    assert not user.check_password('anything')
    assert repr(user) == '<User nobody>'
