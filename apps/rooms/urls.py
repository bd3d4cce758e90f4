from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'rooms'

# Router for ViewSets
router = DefaultRouter()
router.register(r'rooms', views.RoomViewSet, basename='room')

urlpatterns = [
    # Room ViewSet routes
    # POST   /api/rooms/                                    - Create room (manager)
    # POST   /api/rooms/join/                               - Request to join by code
    # GET    /api/rooms/{khata_id}/                         - Room details
    # DELETE /api/rooms/{khata_id}/                         - Delete room (manager)
    # GET    /api/rooms/{khata_id}/members/                 - Approved members
    # GET    /api/rooms/{khata_id}/pending/                 - Join requests (manager)
    # GET    /api/rooms/{khata_id}/pending-counts/          - Items awaiting approval
    # POST   /api/rooms/{khata_id}/approve/{user_id}/       - Approve join request
    # POST   /api/rooms/{khata_id}/reject/{user_id}/        - Reject join request
    # POST   /api/rooms/{khata_id}/leave/                   - Leave room
    # POST   /api/rooms/{khata_id}/regenerate-code/         - New room code (manager)
    # POST   /api/rooms/{khata_id}/members/create/          - Create member (master manager)

    # Staff
    path('staff/<str:khata_id>/', views.staff, name='staff'),
    path('staff/<str:khata_id>/<uuid:staff_id>/', views.staff_detail, name='staff-detail'),

    # Include router URLs
    path('', include(router.urls)),
]
