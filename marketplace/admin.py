from django.contrib import admin

from .models import Cart, CartItem, Feedback, Order, OrderItem, Product, QueryResponse, SupportQuery


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ('name', 'seller', 'seller_type', 'category', 'price', 'stock',
                    'min_order_quantity', 'status', 'created_at')
    list_filter = ('status', 'seller_type', 'is_proxy', 'category', 'created_at')
    search_fields = ('name', 'description', 'seller__email', 'seller__business_name')
    readonly_fields = ('id', 'created_at', 'updated_at')

    fieldsets = (
        (None, {
            'fields': ('id', 'name', 'description', 'category', 'subcategory', 'tags')
        }),
        ('Seller', {
            'fields': ('seller', 'seller_type', 'is_proxy', 'proxy_source')
        }),
        ('Pricing & Inventory', {
            'fields': ('price', 'stock', 'min_order_quantity', 'availability_date', 'status')
        }),
        ('Media & Specifications', {
            'fields': ('images', 'specifications'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = ('product', 'seller', 'product_name', 'quantity', 'unit_price', 'line_total')


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('order_number', 'customer', 'retailer', 'status', 'payment_status', 'total',
                    'created_at', 'item_count')
    list_filter = ('status', 'payment_status', 'payment_method', 'fulfillment_method', 'created_at')
    search_fields = ('order_number', 'customer__email', 'retailer__email', 'payment_id')
    # Totals are fixed when the order is placed
    readonly_fields = ('id', 'order_number', 'subtotal', 'tax', 'shipping', 'total',
                       'created_at', 'updated_at', 'item_count')

    inlines = [OrderItemInline]

    fieldsets = (
        ('Order Information', {
            'fields': ('id', 'order_number', 'customer', 'retailer', 'status')
        }),
        ('Payment', {
            'fields': ('payment_status', 'payment_method', 'payment_id')
        }),
        ('Pricing', {
            'fields': ('subtotal', 'tax', 'shipping', 'total')
        }),
        ('Fulfillment', {
            'fields': ('fulfillment_method', 'shipping_address', 'scheduled_date',
                       'delivery_date', 'tracking_number')
        }),
        ('Notes', {
            'fields': ('notes',),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        })
    )

    def item_count(self, obj):
        return obj.items.count()
    item_count.short_description = "Items"


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    readonly_fields = ('line_total', 'added_at')


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ('user', 'line_count', 'created_at', 'updated_at')
    list_filter = ('created_at', 'updated_at')
    search_fields = ('user__email', 'user__name')
    readonly_fields = ('created_at', 'updated_at')

    inlines = [CartItemInline]

    def line_count(self, obj):
        return obj.items.count()
    line_count.short_description = "Lines"


@admin.register(Feedback)
class FeedbackAdmin(admin.ModelAdmin):
    list_display = ('user', 'type', 'rating', 'product', 'order', 'status', 'created_at')
    list_filter = ('status', 'type', 'rating', 'created_at')
    search_fields = ('user__email', 'product__name', 'order__order_number', 'comment')
    readonly_fields = ('id', 'user', 'product', 'order', 'type', 'rating', 'comment', 'images',
                       'created_at', 'updated_at')
    list_editable = ('status',)


class QueryResponseInline(admin.TabularInline):
    model = QueryResponse
    extra = 0
    readonly_fields = ('user', 'created_at')


@admin.register(SupportQuery)
class SupportQueryAdmin(admin.ModelAdmin):
    list_display = ('subject', 'user', 'order', 'product', 'status', 'reply_count', 'created_at')
    list_filter = ('status', 'created_at')
    search_fields = ('subject', 'message', 'user__email', 'order__order_number')
    readonly_fields = ('id', 'created_at', 'updated_at')

    inlines = [QueryResponseInline]

    def reply_count(self, obj):
        return obj.responses.count()
    reply_count.short_description = "Replies"
