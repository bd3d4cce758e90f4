from django.urls import path
from . import views

app_name = 'ledger'

urlpatterns = [
    # Deposits
    path('deposits/<str:khata_id>/', views.deposits, name='deposits'),
    path('deposits/<str:khata_id>/<uuid:deposit_id>/approve/', views.deposit_approve, name='deposit-approve'),
    path('deposits/<str:khata_id>/<uuid:deposit_id>/reject/', views.deposit_reject, name='deposit-reject'),

    # Expenses
    path('expenses/<str:khata_id>/', views.expenses, name='expenses'),
    path('expenses/<str:khata_id>/<uuid:expense_id>/approve/', views.expense_approve, name='expense-approve'),
    path('expenses/<str:khata_id>/<uuid:expense_id>/reject/', views.expense_reject, name='expense-reject'),

    # Fund accounting
    path('shopping/<str:khata_id>/balances/', views.balances, name='balances'),
    path('shopping/<str:khata_id>/summary/', views.fund_summary, name='summary'),
    path('shopping/<str:khata_id>/adjust/', views.adjust, name='adjust'),
    path('shopping/<str:khata_id>/members/', views.shopping_members, name='shopping-members'),
    path('user/<uuid:user_id>/meal-balance/', views.meal_balance, name='meal-balance'),
]
