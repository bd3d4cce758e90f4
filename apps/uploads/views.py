from rest_framework import status
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .exceptions import UploadServiceError
from .serializers import UploadSerializer, UploadResultSerializer
from .services import store_image


@extend_schema(
    request={'multipart/form-data': UploadSerializer},
    responses={200: UploadResultSerializer},
    description="Upload an image (JPEG, PNG, WebP or GIF, at most 5MB) and get back its URL.",
    tags=['uploads'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def upload(request):
    """Store an uploaded image."""
    try:
        result = store_image(upload=request.FILES.get('file'), user=request.user)
    except UploadServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    result['url'] = request.build_absolute_uri(result['url'])
    return Response(UploadResultSerializer(result).data)
