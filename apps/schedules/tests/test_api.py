import pytest
from django.urls import reverse
from rest_framework import status

from apps.schedules.models import ScheduleEvent, ScheduleResponse

from .conftest import CANDIDATES


# =============================================================================
# Event CRUD Tests
# =============================================================================

@pytest.mark.django_db
class TestEventCRUD:
    """Tests for /api/schedules/"""

    def test_create_event(self, authenticated_client, user):
        url = reverse('schedules:event-list')
        data = {
            'title': '歓迎会',
            'candidate_dates': [CANDIDATES[2], CANDIDATES[0]],
            'location': '新宿',
            'budget': 4000,
        }
        response = authenticated_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['candidate_dates'] == [CANDIDATES[0], CANDIDATES[2]]
        assert response.data['web_url'].startswith('https://kanjy.vercel.app/?id=')
        assert ScheduleEvent.objects.get(id=response.data['id']).created_by == user

    def test_create_requires_candidates(self, authenticated_client):
        url = reverse('schedules:event-list')
        response = authenticated_client.post(url, {'title': 'x', 'candidate_dates': []}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_create_unauthenticated(self, api_client):
        url = reverse('schedules:event-list')
        response = api_client.post(url, {'title': 'x'}, format='json')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_list_only_own_events(self, authenticated_client, other_client, event):
        url = reverse('schedules:event-list')

        assert len(authenticated_client.get(url).data) == 1
        assert len(other_client.get(url).data) == 0

    def test_retrieve_includes_optimal_date(self, authenticated_client, event, responses):
        url = reverse('schedules:event-detail', kwargs={'pk': event.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['optimal_date'] == CANDIDATES[1]
        assert response.data['response_count'] == 3

    def test_partial_update(self, authenticated_client, event):
        url = reverse('schedules:event-detail', kwargs={'pk': event.id})
        response = authenticated_client.patch(url, {'title': '新年会（改）'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        event.refresh_from_db()
        assert event.title == '新年会（改）'

    def test_other_user_cannot_update(self, other_client, event):
        url = reverse('schedules:event-detail', kwargs={'pk': event.id})
        response = other_client.patch(url, {'title': 'hack'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete_event(self, authenticated_client, event):
        url = reverse('schedules:event-detail', kwargs={'pk': event.id})
        response = authenticated_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not ScheduleEvent.objects.filter(id=event.id).exists()


# =============================================================================
# Responses and Statistics Tests
# =============================================================================

@pytest.mark.django_db
class TestEventResponses:

    def test_list_responses_excludes_deleted(self, authenticated_client, event, responses):
        delete_url = reverse('schedules:response-delete', kwargs={'pk': responses[2].id})
        assert authenticated_client.delete(delete_url).status_code == status.HTTP_204_NO_CONTENT

        url = reverse('schedules:event-responses', kwargs={'pk': event.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        names = {item['participant_name'] for item in response.data}
        assert names == {'佐藤', '鈴木'}

    def test_delete_response_other_user(self, other_client, responses):
        url = reverse('schedules:response-delete', kwargs={'pk': responses[0].id})
        response = other_client.delete(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_statistics(self, authenticated_client, event, responses):
        url = reverse('schedules:event-statistics', kwargs={'pk': event.id})
        response = authenticated_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['total_responses'] == 3
        assert response.data['attending_count'] == 1
        assert response.data['maybe_count'] == 1
        assert response.data['not_attending_count'] == 1
        assert response.data['optimal_date'] == CANDIDATES[1]
        assert response.data['dates'][0]['date'] == CANDIDATES[1]
        assert response.data['dates'][0]['available_count'] == 2


# =============================================================================
# Public Web Form Tests
# =============================================================================

@pytest.mark.django_db
class TestPublicForm:

    def test_get_public_event(self, api_client, event, responses):
        url = reverse('schedules:public-event', kwargs={'pk': event.id})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['title'] == '新年会'
        assert len(response.data['responses']) == 3
        assert 'created_by' not in response.data

    def test_public_event_not_found(self, api_client, db):
        url = reverse('schedules:public-event', kwargs={'pk': '00000000-0000-0000-0000-000000000000'})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_respond(self, api_client, event):
        url = reverse('schedules:public-respond', kwargs={'pk': event.id})
        data = {
            'participant_name': '伊藤',
            'available_dates': [CANDIDATES[0]],
            'status': 'attending',
            'comment': '楽しみです',
        }
        response = api_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert ScheduleResponse.objects.filter(event=event, participant_name='伊藤').exists()

    def test_respond_invalid_status(self, api_client, event):
        url = reverse('schedules:public-respond', kwargs={'pk': event.id})
        response = api_client.post(url, {'participant_name': 'x', 'status': 'yes'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_respond_unknown_date(self, api_client, event):
        url = reverse('schedules:public-respond', kwargs={'pk': event.id})
        data = {'participant_name': 'x', 'available_dates': ['2030-01-01']}
        response = api_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'error' in response.data

    def test_respond_closed_event(self, api_client, closed_event):
        url = reverse('schedules:public-respond', kwargs={'pk': closed_event.id})
        data = {'participant_name': 'x', 'available_dates': [CANDIDATES[0]]}
        response = api_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
