"""
NailArt AI - AI thumbnail generator backed by Supabase and Imagen
"""
