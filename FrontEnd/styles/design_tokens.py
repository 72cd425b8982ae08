# Design tokens for Uptime UI

COLORS = {
    'background': '#F7F9FC',
    'surface': '#E7F0FF',
    'primary': '#5EA1FF',
    'text': '#3C4450',
    'text_strong': '#133A62',
    'border': '#DCE3ED',
    'footer_bg': '#E7F0FF',
    'footer_text': '#133A62',
    'start': '#3BB273',
    'pause': '#F29E38',
    'stop': '#E05A5A',
    'disabled': '#B8C2CF',
    'work_day': '#4CAF6A',
    'empty_day': '#E3E7ED',
    'today_outline': '#3A7BEA',
    'complete': '#2E9B57',
}

FONTS = {
    'family': 'Inter, Manrope, Arial, sans-serif',
    'footer_size': 16,
}

CALENDAR = {
    'cell': 12,
    'gap': 2,
    'radius': 1,
    'work_day_alpha': 180,
}
