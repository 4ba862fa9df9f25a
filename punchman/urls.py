from django.urls import path

from .views import GoogleAuthView, MerchantUserLoginView, ScanView

app_name = "punchman"

urlpatterns = [
    path("scan/", ScanView.as_view(), name="scan"),
    path("auth/google/", GoogleAuthView.as_view(), name="auth-google"),
    path("merchant-users/login/", MerchantUserLoginView.as_view(), name="merchant-user-login"),
]
