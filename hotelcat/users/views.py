from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import (
    LoginSerializer, RegisterSerializer, RegisteredUserSerializer, UserSerializer,
)
from .services import login_user, register_user


class RegisterView(APIView):
    """Open registration. Managers must name the hotel they run."""
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        user = register_user(
            email=data['email'],
            password=data['password'],
            role=data['role'],
            hotel_slug=data.get('hotelSlug'),
        )
        return Response(RegisteredUserSerializer(user).data, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """Email + password login. Returns a bearer token and the user profile."""
    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        token, user = login_user(**serializer.validated_data)
        return Response({'token': token, 'user': UserSerializer(user).data})


class MeView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return Response(UserSerializer(request.user).data)
